# schoolhub/routers/attendance.py
from typing import Optional
from uuid import UUID
from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.auth_dependencies import (
    require_class_ownership, require_ownership, require_teacher_or_admin
)
from ..core.database import get_db
from ..core.exceptions import ValidationError
from ..schemas.attendance_schemas import AttendanceCreate, AttendanceUpdate
from ..services.attendance_service import AttendanceService
from ..utils.formatting import attendance_to_dict
from ..utils.pagination import PaginationParams, Paginator

router = APIRouter(prefix="/api/attendance", tags=["Attendance"])


@router.get("", dependencies=[Depends(require_teacher_or_admin)])
async def list_attendance(
    class_id: Optional[UUID] = Query(None, alias="classId"),
    student_id: Optional[UUID] = Query(None, alias="studentId"),
    on_date: Optional[date] = Query(None, alias="date"),
    pagination: PaginationParams = Depends(Paginator.get_pagination_params),
    db: AsyncSession = Depends(get_db)
):
    service = AttendanceService(db)
    records, total = await service.list_attendance(
        pagination, class_id=class_id, student_id=student_id, on_date=on_date
    )
    return {
        "attendance": [attendance_to_dict(record) for record in records],
        "pagination": Paginator.create_meta(pagination, total),
    }


@router.get("/student/{student_id}", dependencies=[Depends(require_ownership("student", "student_id"))])
async def get_student_attendance(
    student_id: UUID,
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    db: AsyncSession = Depends(get_db)
):
    """A student's attendance with per-status summary"""
    service = AttendanceService(db)
    result = await service.student_attendance(student_id, start_date, end_date)
    return {
        **result,
        "attendance": [
            attendance_to_dict(record, include_student=False) for record in result["attendance"]
        ],
    }


@router.get("/class/{class_id}", dependencies=[Depends(require_class_ownership("class_id"))])
async def get_class_attendance(
    class_id: UUID,
    on_date: Optional[date] = Query(None, alias="date"),
    db: AsyncSession = Depends(get_db)
):
    service = AttendanceService(db)
    records = await service.class_attendance(class_id, on_date)
    return {"attendance": [attendance_to_dict(record, include_class=False) for record in records]}


@router.get("/{id}", dependencies=[Depends(require_ownership("attendance"))])
async def get_attendance(id: UUID, db: AsyncSession = Depends(get_db)):
    service = AttendanceService(db)
    return {"attendance": attendance_to_dict(await service.get_detailed(id))}


@router.post("", status_code=201, dependencies=[Depends(require_teacher_or_admin)])
async def mark_attendance(body: AttendanceCreate, db: AsyncSession = Depends(get_db)):
    if not body.student_id or not body.class_id or not body.attendance_date or not body.status:
        raise ValidationError("Student ID, Class ID, date, and status are required")

    service = AttendanceService(db)
    record = await service.mark_attendance(
        body.student_id, body.class_id, body.attendance_date, body.status
    )
    return {"message": "Attendance marked successfully", "attendance": attendance_to_dict(record)}


@router.put("/{id}", dependencies=[Depends(require_teacher_or_admin)])
async def update_attendance(id: UUID, body: AttendanceUpdate, db: AsyncSession = Depends(get_db)):
    service = AttendanceService(db)
    record = await service.update_status(id, body.status)
    return {"message": "Attendance updated successfully", "attendance": attendance_to_dict(record)}
