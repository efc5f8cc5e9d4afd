# schoolhub/services/grades_service.py
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID
import logging

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.orm import selectinload

from .base_service import BaseService
from .statistics import exam_statistics, grade_average
from ..core.exceptions import (
    ConflictError, NotFoundError, ValidationError,
    ForeignKeyViolationError, RecordNotFoundError, UniqueConstraintError
)
from ..models.exam import Exam
from ..models.grade import Grade
from ..models.student import Student
from ..models.user import User
from ..utils.pagination import PaginationParams

logger = logging.getLogger(__name__)

DUPLICATE_GRADE = "Grade already exists for this student in this exam"


class GradesService(BaseService[Grade]):
    def __init__(self, db: AsyncSession):
        super().__init__(Grade, db)

    def _with_relations(self, stmt):
        return stmt.options(
            selectinload(Grade.student).selectinload(Student.user),
            selectinload(Grade.exam),
            selectinload(Grade.subject),
        )

    async def get_detailed(self, grade_id: UUID) -> Grade:
        stmt = (
            self._with_relations(select(Grade))
            .where(Grade.id == grade_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        grade = result.scalar_one_or_none()
        if not grade:
            raise NotFoundError("Grade")
        return grade

    async def list_grades(
        self,
        pagination: PaginationParams,
        exam_id: Optional[UUID] = None,
        student_id: Optional[UUID] = None,
        subject_id: Optional[UUID] = None
    ) -> Tuple[List[Grade], int]:
        conditions = []
        if exam_id:
            conditions.append(Grade.exam_id == exam_id)
        if student_id:
            conditions.append(Grade.student_id == student_id)
        if subject_id:
            conditions.append(Grade.subject_id == subject_id)

        stmt = (
            self._with_relations(select(Grade))
            .join(Exam, Grade.exam_id == Exam.id)
            .where(*conditions)
            .order_by(Exam.date.desc())
            .offset(pagination.offset)
            .limit(pagination.limit)
        )
        result = await self.db.execute(stmt)
        total = await self.count(*conditions)
        return result.scalars().all(), total

    async def create_grade(self, exam_id: UUID, student_id: UUID, subject_id: UUID, marks: int) -> Grade:
        existing = await self.count(
            Grade.exam_id == exam_id,
            Grade.student_id == student_id,
            Grade.subject_id == subject_id,
        )
        if existing:
            raise ConflictError(DUPLICATE_GRADE)

        try:
            grade = await self.create({
                "exam_id": exam_id,
                "student_id": student_id,
                "subject_id": subject_id,
                "marks": marks,
            })
        except UniqueConstraintError:
            raise ConflictError(DUPLICATE_GRADE)
        except ForeignKeyViolationError:
            raise ValidationError("Invalid exam, student, or subject ID")
        logger.info(f"Grade recorded: student {student_id} exam {exam_id} marks {marks}")
        return await self.get_detailed(grade.id)

    async def update_marks(self, grade_id: UUID, marks: Optional[int]) -> Grade:
        if marks is None:
            raise ValidationError("Marks are required")
        try:
            await self.update(grade_id, {"marks": marks})
        except RecordNotFoundError:
            raise NotFoundError("Grade")
        return await self.get_detailed(grade_id)

    async def delete_grade(self, grade_id: UUID) -> None:
        try:
            await self.delete(grade_id)
        except RecordNotFoundError:
            raise NotFoundError("Grade")

    async def student_grades(self, student_id: UUID, subject_id: Optional[UUID] = None) -> Dict[str, Any]:
        """A student's grades by exam date, newest first, with the rounded average"""
        stmt = (
            select(Grade)
            .join(Exam, Grade.exam_id == Exam.id)
            .options(selectinload(Grade.exam), selectinload(Grade.subject))
            .where(Grade.student_id == student_id)
        )
        if subject_id:
            stmt = stmt.where(Grade.subject_id == subject_id)
        stmt = stmt.order_by(Exam.date.desc())

        result = await self.db.execute(stmt)
        grades = result.scalars().all()
        return {
            "grades": grades,
            "average": grade_average(grades),
            "total": len(grades),
        }

    async def exam_grades(self, exam_id: UUID) -> Dict[str, Any]:
        stmt = (
            select(Grade)
            .join(Student, Grade.student_id == Student.id)
            .join(User, Student.user_id == User.id)
            .options(
                selectinload(Grade.student).selectinload(Student.user),
                selectinload(Grade.subject),
            )
            .where(Grade.exam_id == exam_id)
            .order_by(User.full_name.asc())
        )
        result = await self.db.execute(stmt)
        grades = result.scalars().all()
        return {
            "grades": grades,
            "statistics": exam_statistics(grades),
        }
