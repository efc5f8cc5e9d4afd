# schoolhub/services/attendance_service.py
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID
from datetime import date
import logging

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.orm import selectinload

from .base_service import BaseService
from .statistics import attendance_percentage, attendance_summary
from ..core.exceptions import (
    ConflictError, NotFoundError, ValidationError, ForeignKeyViolationError, RecordNotFoundError
)
from ..models.attendance import Attendance, AttendanceStatus
from ..models.student import Student
from ..models.user import User
from ..utils.pagination import PaginationParams

logger = logging.getLogger(__name__)


def parse_status(value: Optional[str]) -> AttendanceStatus:
    try:
        return AttendanceStatus(value)
    except ValueError:
        raise ValidationError("Invalid status. Must be PRESENT, ABSENT, LATE, or EXCUSED")


class AttendanceService(BaseService[Attendance]):
    def __init__(self, db: AsyncSession):
        super().__init__(Attendance, db)

    def _with_relations(self, stmt):
        return stmt.options(
            selectinload(Attendance.student).selectinload(Student.user),
            selectinload(Attendance.class_ref),
        )

    async def get_detailed(self, attendance_id: UUID) -> Attendance:
        stmt = (
            self._with_relations(select(Attendance))
            .where(Attendance.id == attendance_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        attendance = result.scalar_one_or_none()
        if not attendance:
            raise NotFoundError("Attendance record")
        return attendance

    async def list_attendance(
        self,
        pagination: PaginationParams,
        class_id: Optional[UUID] = None,
        student_id: Optional[UUID] = None,
        on_date: Optional[date] = None
    ) -> Tuple[List[Attendance], int]:
        conditions = []
        if class_id:
            conditions.append(Attendance.class_id == class_id)
        if student_id:
            conditions.append(Attendance.student_id == student_id)
        if on_date:
            conditions.append(Attendance.date == on_date)

        stmt = (
            self._with_relations(select(Attendance))
            .where(*conditions)
            .order_by(Attendance.date.desc())
            .offset(pagination.offset)
            .limit(pagination.limit)
        )
        result = await self.db.execute(stmt)
        total = await self.count(*conditions)
        return result.scalars().all(), total

    async def mark_attendance(self, student_id: UUID, class_id: UUID, on_date: date, status: str) -> Attendance:
        """Record one day of attendance; a second record for the same day is rejected"""
        status = parse_status(status)
        existing = await self.count(Attendance.student_id == student_id, Attendance.date == on_date)
        if existing:
            raise ConflictError("Attendance already marked for this student on this date")

        try:
            attendance = await self.create({
                "student_id": student_id,
                "class_id": class_id,
                "date": on_date,
                "status": status,
            })
        except ForeignKeyViolationError:
            raise ValidationError("Invalid student or class ID")
        logger.info(f"Attendance marked: student {student_id} on {on_date} as {status.value}")
        return await self.get_detailed(attendance.id)

    async def update_status(self, attendance_id: UUID, status: str) -> Attendance:
        if not status:
            raise ValidationError("Status is required")
        status = parse_status(status)
        try:
            await self.update(attendance_id, {"status": status})
        except RecordNotFoundError:
            raise NotFoundError("Attendance record")
        return await self.get_detailed(attendance_id)

    async def student_attendance(
        self,
        student_id: UUID,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None
    ) -> Dict[str, Any]:
        """A student's records newest first, with summary and percentage"""
        stmt = (
            select(Attendance)
            .options(selectinload(Attendance.class_ref))
            .where(Attendance.student_id == student_id)
        )
        if start_date and end_date:
            stmt = stmt.where(Attendance.date >= start_date, Attendance.date <= end_date)
        stmt = stmt.order_by(Attendance.date.desc())

        result = await self.db.execute(stmt)
        records = result.scalars().all()
        summary = attendance_summary(records)
        return {
            "attendance": records,
            "summary": summary,
            "percentage": attendance_percentage(summary),
        }

    async def class_attendance(self, class_id: UUID, on_date: Optional[date] = None) -> List[Attendance]:
        stmt = (
            select(Attendance)
            .join(Student, Attendance.student_id == Student.id)
            .join(User, Student.user_id == User.id)
            .options(selectinload(Attendance.student).selectinload(Student.user))
            .where(Attendance.class_id == class_id)
        )
        if on_date:
            stmt = stmt.where(Attendance.date == on_date)
        stmt = stmt.order_by(User.full_name.asc())

        result = await self.db.execute(stmt)
        return result.scalars().all()
