# schoolhub/services/auth_service.py
"""Registration, login and profile management."""
from typing import Any, Dict, Optional
from uuid import UUID
import logging

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.orm import selectinload

from .base_service import BaseService
from .notification_service import NotificationService
from ..core.exceptions import (
    AuthenticationError, ConflictError, NotFoundError, ValidationError, UniqueConstraintError
)
from ..core.security import create_access_token, hash_password, verify_password
from ..models.class_model import ClassModel
from ..models.notification import NotificationType
from ..models.parent import Parent
from ..models.student import Student
from ..models.teacher import Teacher
from ..models.user import Role, User
from ..utils.formatting import class_brief, iso, uid, user_brief, user_to_dict

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8

ROLE_LABELS = {
    Role.STUDENT: "Student",
    Role.TEACHER: "Teacher",
    Role.PARENT: "Parent",
    Role.ADMIN: "Administrator",
}


def token_for(user: User) -> str:
    return create_access_token({
        "id": str(user.id),
        "email": user.email,
        "fullName": user.full_name,
        "role": user.role.value,
    })


class AuthService(BaseService[User]):
    def __init__(self, db: AsyncSession):
        super().__init__(User, db)
        self.notifications = NotificationService(db)

    async def get_by_email(self, email: str, role: Optional[Role] = None) -> Optional[User]:
        stmt = (
            select(User)
            .options(selectinload(User.student), selectinload(User.teacher), selectinload(User.parent))
            .where(User.email == email)
        )
        if role is not None:
            stmt = stmt.where(User.role == role)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def register(self, email: str, password: str, full_name: str,
                       role: str = Role.STUDENT.value, parent_email: Optional[str] = None) -> Dict[str, Any]:
        """Create the identity and its role profile in one transaction"""
        if not email or not password or not full_name:
            raise ValidationError("Email, password, and full name are required")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise ValidationError("Password must be at least 8 characters long")
        try:
            role = Role(role)
        except ValueError:
            raise ValidationError("Invalid role. Must be ADMIN, TEACHER, STUDENT, or PARENT")

        if await self.get_by_email(email):
            raise ConflictError("Email already exists")

        parent_user = None
        if role == Role.STUDENT and parent_email:
            parent_user = await self.get_by_email(parent_email, Role.PARENT)
            if not parent_user:
                raise ValidationError(
                    "Parent not found with the provided email. Please register the parent first."
                )
            if not parent_user.parent:
                raise ValidationError("Parent profile not properly set up.")

        user = User(email=email, password_hash=hash_password(password), full_name=full_name, role=role)
        self.db.add(user)
        try:
            await self.flush()
        except UniqueConstraintError:
            raise ConflictError("Email already exists")

        profile = None
        if role == Role.STUDENT:
            profile = Student(user_id=user.id, parent_id=parent_user.parent.id if parent_user else None)
        elif role == Role.TEACHER:
            profile = Teacher(user_id=user.id)
        elif role == Role.PARENT:
            profile = Parent(user_id=user.id)
        if profile is not None:
            self.db.add(profile)

        try:
            await self.commit()
        except UniqueConstraintError:
            raise ConflictError("Email already exists")
        logger.info(f"User registered: {email} ({role.value})")

        user_data = {
            "id": uid(user.id),
            "email": user.email,
            "fullName": user.full_name,
            "role": role.value,
            "createdAt": iso(user.created_at),
            "updatedAt": iso(user.updated_at),
        }
        if profile is not None:
            user_data[role.value.lower()] = {"id": uid(profile.id)}
        token = token_for(user)

        pending = []
        if parent_user is not None:
            pending.append((parent_user.id, "New Student Assigned",
                            f"{full_name} has been assigned to you as a student.",
                            NotificationType.PARENT_ASSIGNED))
            pending.append((user.id, "Parent Assigned",
                            f"{parent_user.full_name} has been assigned as your parent.",
                            NotificationType.PARENT_ASSIGNED))
        label = ROLE_LABELS[role]
        await self.notifications.send_after_commit(
            *pending,
            admins=(f"New {label} Registered",
                    f"{full_name} ({email}) has registered as a {label}.",
                    NotificationType.GENERAL),
        )
        return {"token": token, "user": user_data}

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        if not email or not password:
            raise ValidationError("Email and password are required")

        user = await self.get_by_email(email)
        if not user or not verify_password(password, user.password_hash):
            logger.info(f"Failed login for email: {email}")
            raise AuthenticationError("Invalid email or password")

        profile = user.student or user.teacher or user.parent
        user_data = user_to_dict(user)
        user_data["profileId"] = uid(profile.id) if profile else None
        return {"token": token_for(user), "user": user_data}

    async def get_profile(self, user_id: UUID) -> Dict[str, Any]:
        stmt = (
            select(User)
            .options(
                selectinload(User.student).selectinload(Student.class_ref)
                .selectinload(ClassModel.teacher).selectinload(Teacher.user),
                selectinload(User.student).selectinload(Student.parent).selectinload(Parent.user),
                selectinload(User.teacher).selectinload(Teacher.classes)
                .selectinload(ClassModel.students).selectinload(Student.user),
                selectinload(User.parent).selectinload(Parent.children).selectinload(Student.user),
                selectinload(User.parent).selectinload(Parent.children).selectinload(Student.class_ref),
            )
            .where(User.id == user_id)
        )
        result = await self.db.execute(stmt)
        user = result.scalar_one_or_none()
        if not user:
            raise NotFoundError("User")

        data = user_to_dict(user)
        student, teacher, parent = user.student, user.teacher, user.parent
        if student is not None:
            class_info = None
            if student.class_ref is not None:
                class_teacher = student.class_ref.teacher
                class_info = {
                    **class_brief(student.class_ref),
                    "teacher": {"id": uid(class_teacher.id), "user": user_brief(class_teacher.user)}
                    if class_teacher else None,
                }
            data["student"] = {
                "id": uid(student.id),
                "classId": uid(student.class_id),
                "class": class_info,
                "parent": {
                    "id": uid(student.parent.id),
                    "userId": uid(student.parent.user_id),
                    "user": {"id": uid(student.parent.user.id), **user_brief(student.parent.user)},
                } if student.parent else None,
            }
        if teacher is not None:
            data["teacher"] = {
                "id": uid(teacher.id),
                "classes": [
                    {
                        **class_brief(class_obj),
                        "students": [
                            {"id": uid(s.id), "user": user_brief(s.user)} for s in class_obj.students
                        ],
                    }
                    for class_obj in teacher.classes
                ],
            }
        if parent is not None:
            data["parent"] = {
                "id": uid(parent.id),
                "students": [
                    {
                        "id": uid(child.id),
                        "classId": uid(child.class_id),
                        "user": {"id": uid(child.user.id), **user_brief(child.user)},
                        "class": class_brief(child.class_ref),
                    }
                    for child in parent.children
                ],
            }
        return data

    async def update_profile(self, user_id: UUID, full_name: Optional[str] = None,
                             avatar: Optional[str] = None, avatar_set: bool = False) -> Dict[str, Any]:
        if full_name is not None and full_name.strip() == "":
            raise ValidationError("Full name cannot be empty")

        changes = {}
        if full_name:
            changes["full_name"] = full_name
        if avatar_set:
            changes["avatar"] = avatar
        user = await self.update(user_id, changes)
        return user_to_dict(user)
