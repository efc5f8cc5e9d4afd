# schoolhub/services/authorization_service.py
"""Role, ownership and class-membership checks.

The policy never raises for a denial; it returns a Decision that the FastAPI
dependencies in core.auth_dependencies turn into a response. Every lookup that
finds no row denies, and a caller without the profile a branch needs is denied
without touching the database.
"""
from dataclasses import dataclass
from typing import Iterable, Optional
from uuid import UUID
import logging

from sqlalchemy import select, exists
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.caller import (
    Caller, AdminCaller, TeacherCaller, StudentCaller, ParentCaller
)
from ..models.attendance import Attendance
from ..models.class_model import ClassModel
from ..models.exam import Exam
from ..models.grade import Grade
from ..models.student import Student

logger = logging.getLogger(__name__)

RESOURCE_TYPES = ("student", "parent", "teacher", "attendance", "grade")


@dataclass(frozen=True)
class Decision:
    permitted: bool
    reason: Optional[str] = None

    def __bool__(self) -> bool:
        return self.permitted


PERMIT = Decision(True)


def deny(reason: str) -> Decision:
    return Decision(False, reason)


class OwnershipLookup:
    """Existence queries the policy needs, one per predicate"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def _exists(self, *conditions) -> bool:
        result = await self.db.execute(select(exists().where(*conditions)))
        return bool(result.scalar())

    async def student_has_parent(self, student_id: UUID, parent_id: UUID) -> bool:
        return await self._exists(Student.id == student_id, Student.parent_id == parent_id)

    async def attendance_belongs_to_student(self, attendance_id: UUID, student_id: UUID) -> bool:
        return await self._exists(Attendance.id == attendance_id, Attendance.student_id == student_id)

    async def attendance_in_teacher_class(self, attendance_id: UUID, teacher_id: UUID) -> bool:
        return await self._exists(
            Attendance.id == attendance_id,
            Attendance.class_id == ClassModel.id,
            ClassModel.teacher_id == teacher_id,
        )

    async def grade_belongs_to_student(self, grade_id: UUID, student_id: UUID) -> bool:
        return await self._exists(Grade.id == grade_id, Grade.student_id == student_id)

    async def grade_in_teacher_exam(self, grade_id: UUID, teacher_id: UUID) -> bool:
        return await self._exists(
            Grade.id == grade_id,
            Grade.exam_id == Exam.id,
            Exam.teacher_id == teacher_id,
        )

    async def class_taught_by(self, class_id: UUID, teacher_id: UUID) -> bool:
        return await self._exists(ClassModel.id == class_id, ClassModel.teacher_id == teacher_id)

    async def student_in_class(self, student_id: UUID, class_id: UUID) -> bool:
        return await self._exists(Student.id == student_id, Student.class_id == class_id)

    async def parent_has_child_in_class(self, parent_id: UUID, class_id: UUID) -> bool:
        return await self._exists(Student.parent_id == parent_id, Student.class_id == class_id)


class AuthorizationPolicy:
    def __init__(self, lookup: OwnershipLookup):
        self.lookup = lookup

    def authorize(self, caller: Caller, required_roles: Iterable[str]) -> Decision:
        if caller.role in set(required_roles):
            return PERMIT
        return deny("insufficient role")

    async def check_ownership(self, caller: Caller, resource_type: str, resource_id: UUID) -> Decision:
        if resource_type not in RESOURCE_TYPES:
            return deny("invalid resource type")
        if isinstance(caller, AdminCaller):
            return PERMIT

        owned = False
        if resource_type == "student":
            if isinstance(caller, StudentCaller):
                owned = caller.student_id is not None and caller.student_id == resource_id
            elif isinstance(caller, ParentCaller) and caller.parent_id is not None:
                owned = await self.lookup.student_has_parent(resource_id, caller.parent_id)

        elif resource_type == "parent":
            owned = isinstance(caller, ParentCaller) and caller.parent_id is not None \
                and caller.parent_id == resource_id

        elif resource_type == "teacher":
            owned = isinstance(caller, TeacherCaller) and caller.teacher_id is not None \
                and caller.teacher_id == resource_id

        elif resource_type == "attendance":
            if isinstance(caller, StudentCaller) and caller.student_id is not None:
                owned = await self.lookup.attendance_belongs_to_student(resource_id, caller.student_id)
            elif isinstance(caller, TeacherCaller) and caller.teacher_id is not None:
                owned = await self.lookup.attendance_in_teacher_class(resource_id, caller.teacher_id)

        elif resource_type == "grade":
            if isinstance(caller, StudentCaller) and caller.student_id is not None:
                owned = await self.lookup.grade_belongs_to_student(resource_id, caller.student_id)
            elif isinstance(caller, TeacherCaller) and caller.teacher_id is not None:
                owned = await self.lookup.grade_in_teacher_exam(resource_id, caller.teacher_id)

        if owned:
            return PERMIT
        logger.warning(f"Ownership denied: {caller.role} {caller.user_id} on {resource_type} {resource_id}")
        return deny("Access denied. You do not own this resource.")

    async def check_class_ownership(self, caller: Caller, class_id: UUID) -> Decision:
        if isinstance(caller, AdminCaller):
            return PERMIT
        if not isinstance(caller, TeacherCaller):
            return deny("Access denied. Only teachers and admins can access class resources.")
        if caller.teacher_id is not None and await self.lookup.class_taught_by(class_id, caller.teacher_id):
            return PERMIT
        logger.warning(f"Class ownership denied: teacher {caller.teacher_id} on class {class_id}")
        return deny("Access denied. You are not the teacher of this class.")

    async def check_class_membership(self, caller: Caller, class_id: UUID) -> Decision:
        if isinstance(caller, (AdminCaller, TeacherCaller)):
            return PERMIT

        member = False
        if isinstance(caller, StudentCaller) and caller.student_id is not None:
            member = await self.lookup.student_in_class(caller.student_id, class_id)
        elif isinstance(caller, ParentCaller) and caller.parent_id is not None:
            member = await self.lookup.parent_has_child_in_class(caller.parent_id, class_id)

        if member:
            return PERMIT
        logger.warning(f"Class membership denied: {caller.role} {caller.user_id} on class {class_id}")
        return deny("Access denied. You are not a member of this class.")
