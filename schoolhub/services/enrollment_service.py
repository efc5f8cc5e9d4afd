# schoolhub/services/enrollment_service.py
"""Enrollments and the student's current class.

Creating or deleting an enrollment also moves student.class_id; both changes
are committed together. Notifications go out after the commit.
"""
from typing import List, Optional
from uuid import UUID
import logging

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.orm import selectinload

from .base_service import BaseService
from .notification_service import NotificationService
from ..core.exceptions import (
    ConflictError, NotFoundError, ValidationError,
    ForeignKeyViolationError, RecordNotFoundError, UniqueConstraintError
)
from ..models.class_model import ClassModel
from ..models.enrollment import Enrollment
from ..models.notification import NotificationType
from ..models.parent import Parent
from ..models.student import Student
from ..models.user import Role, User

logger = logging.getLogger(__name__)

ALREADY_ENROLLED = "Student is already enrolled in this class"


class EnrollmentService(BaseService[Enrollment]):
    def __init__(self, db: AsyncSession):
        super().__init__(Enrollment, db)
        self.notifications = NotificationService(db)

    async def get_detailed(self, enrollment_id: UUID) -> Enrollment:
        stmt = (
            select(Enrollment)
            .options(
                selectinload(Enrollment.student).selectinload(Student.user),
                selectinload(Enrollment.student).selectinload(Student.parent).selectinload(Parent.user),
                selectinload(Enrollment.class_ref),
            )
            .where(Enrollment.id == enrollment_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        enrollment = result.scalar_one_or_none()
        if not enrollment:
            raise NotFoundError("Enrollment")
        return enrollment

    async def list_enrollments(self, student_id: Optional[UUID] = None,
                               class_id: Optional[UUID] = None) -> List[Enrollment]:
        stmt = select(Enrollment).options(
            selectinload(Enrollment.student).selectinload(Student.user),
            selectinload(Enrollment.class_ref),
        )
        if student_id:
            stmt = stmt.where(Enrollment.student_id == student_id)
        if class_id:
            stmt = stmt.where(Enrollment.class_id == class_id)
        stmt = stmt.order_by(Enrollment.created_at.desc())

        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def enroll(self, student_id: UUID, class_id: UUID, notify_parent: bool = False) -> Enrollment:
        """Create the enrollment and set the student's class in one transaction"""
        if await self.count(Enrollment.student_id == student_id, Enrollment.class_id == class_id):
            raise ConflictError(ALREADY_ENROLLED)

        student = await self.db.get(Student, student_id)
        if student is None:
            raise ValidationError("Invalid student or class ID")
        try:
            enrollment = Enrollment(student_id=student_id, class_id=class_id)
            self.db.add(enrollment)
            student.class_id = class_id
            await self.commit()
        except UniqueConstraintError:
            raise ConflictError("Enrollment already exists")
        except ForeignKeyViolationError:
            raise ValidationError("Invalid student or class ID")
        logger.info(f"Student {student_id} enrolled in class {class_id}")

        enrollment_id = enrollment.id
        await self._notify_enrollment(await self.get_detailed(enrollment_id), notify_parent)
        # A failed notification rolls back and expires loaded state
        return await self.get_detailed(enrollment_id)

    async def assign_by_email(self, student_email: str, class_id: UUID) -> Enrollment:
        stmt = (
            select(User)
            .options(selectinload(User.student))
            .where(User.email == student_email.strip(), User.role == Role.STUDENT)
        )
        result = await self.db.execute(stmt)
        student_user = result.scalar_one_or_none()
        if not student_user or not student_user.student:
            raise ValidationError("Student not found with the provided email")

        student_id = student_user.student.id
        if await self.count(Enrollment.student_id == student_id, Enrollment.class_id == class_id):
            raise ConflictError(ALREADY_ENROLLED)
        if await self.db.get(ClassModel, class_id) is None:
            raise ValidationError("Class not found")

        return await self.enroll(student_id, class_id, notify_parent=True)

    async def unenroll(self, enrollment_id: UUID) -> None:
        """Delete the enrollment and clear the student's class"""
        try:
            enrollment = await self.get_or_raise(enrollment_id)
        except RecordNotFoundError:
            raise NotFoundError("Enrollment")

        student = await self.db.get(Student, enrollment.student_id)
        await self.db.delete(enrollment)
        if student is not None:
            student.class_id = None
        await self.commit()
        logger.info(f"Enrollment {enrollment_id} deleted")

    async def _notify_enrollment(self, enrollment: Enrollment, notify_parent: bool) -> None:
        student = enrollment.student
        class_obj = enrollment.class_ref
        pending = [(
            student.user_id,
            "Assigned to Class",
            f"You have been assigned to {class_obj.name} ({class_obj.level}).",
            NotificationType.CLASS_ASSIGNED,
        )]
        if notify_parent and student.parent is not None:
            pending.append((
                student.parent.user_id,
                "Child Assigned to Class",
                f"{student.user.full_name} has been assigned to {class_obj.name} ({class_obj.level}).",
                NotificationType.CLASS_ASSIGNED,
            ))
        await self.notifications.send_after_commit(
            *pending,
            admins=("New Student Enrollment",
                    f"{student.user.full_name} has been enrolled in {class_obj.name}.",
                    NotificationType.ENROLLMENT),
        )
