# schoolhub/core/caller.py
"""The authenticated caller, modelled as one variant per role.

Every variant carries the identity fields. The profile variants also carry the
id of the role profile, which is None when the identity has the role but the
profile row is missing. Code that needs the profile calls require_profile().
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

from ..models.user import Role, User
from .exceptions import AuthorizationError


@dataclass(frozen=True)
class Caller(ABC):
    user_id: UUID
    email: str
    full_name: str

    @property
    @abstractmethod
    def role(self) -> str:
        ...


@dataclass(frozen=True)
class AdminCaller(Caller):
    @property
    def role(self) -> str:
        return Role.ADMIN.value


@dataclass(frozen=True)
class ProfileCaller(Caller):
    profile_id: Optional[UUID] = None

    label = "Profile"

    def require_profile(self) -> UUID:
        if self.profile_id is None:
            raise AuthorizationError(f"Access denied. {self.label} profile not found.")
        return self.profile_id


@dataclass(frozen=True)
class TeacherCaller(ProfileCaller):
    label = "Teacher"

    @property
    def role(self) -> str:
        return Role.TEACHER.value

    @property
    def teacher_id(self) -> Optional[UUID]:
        return self.profile_id


@dataclass(frozen=True)
class StudentCaller(ProfileCaller):
    class_id: Optional[UUID] = None

    label = "Student"

    @property
    def role(self) -> str:
        return Role.STUDENT.value

    @property
    def student_id(self) -> Optional[UUID]:
        return self.profile_id


@dataclass(frozen=True)
class ParentCaller(ProfileCaller):
    label = "Parent"

    @property
    def role(self) -> str:
        return Role.PARENT.value

    @property
    def parent_id(self) -> Optional[UUID]:
        return self.profile_id


@dataclass(frozen=True)
class UnknownRoleCaller(Caller):
    raw_role: str = ""

    @property
    def role(self) -> str:
        return self.raw_role


def caller_from_user(user: User) -> Caller:
    """Build the caller variant for a user loaded with its profiles"""
    identity = dict(user_id=user.id, email=user.email, full_name=user.full_name)
    role = user.role.value if isinstance(user.role, Role) else str(user.role)

    if role == Role.ADMIN.value:
        return AdminCaller(**identity)
    if role == Role.TEACHER.value:
        return TeacherCaller(**identity, profile_id=user.teacher.id if user.teacher else None)
    if role == Role.STUDENT.value:
        student = user.student
        return StudentCaller(
            **identity,
            profile_id=student.id if student else None,
            class_id=student.class_id if student else None,
        )
    if role == Role.PARENT.value:
        return ParentCaller(**identity, profile_id=user.parent.id if user.parent else None)
    return UnknownRoleCaller(**identity, raw_role=role)
