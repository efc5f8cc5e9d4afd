# schoolhub/routers/enrollments.py
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.auth_dependencies import require_admin, require_teacher_or_admin
from ..core.database import get_db
from ..core.exceptions import ValidationError
from ..schemas.enrollment_schemas import EnrollmentAssign, EnrollmentCreate
from ..services.enrollment_service import EnrollmentService
from ..utils.formatting import enrollment_to_dict

router = APIRouter(prefix="/api/enrollments", tags=["Enrollments"])


@router.get("", dependencies=[Depends(require_teacher_or_admin)])
async def list_enrollments(
    student_id: Optional[UUID] = Query(None, alias="studentId"),
    class_id: Optional[UUID] = Query(None, alias="classId"),
    db: AsyncSession = Depends(get_db)
):
    service = EnrollmentService(db)
    enrollments = await service.list_enrollments(student_id=student_id, class_id=class_id)
    return {"enrollments": [enrollment_to_dict(enrollment) for enrollment in enrollments]}


@router.post("", status_code=201, dependencies=[Depends(require_admin)])
async def create_enrollment(body: EnrollmentCreate, db: AsyncSession = Depends(get_db)):
    """Enroll a student and make the class their current class"""
    if not body.student_id or not body.class_id:
        raise ValidationError("Student ID and Class ID are required")

    service = EnrollmentService(db)
    enrollment = await service.enroll(body.student_id, body.class_id)
    return {"message": "Enrollment created successfully", "enrollment": enrollment_to_dict(enrollment)}


@router.post("/assign", status_code=201, dependencies=[Depends(require_teacher_or_admin)])
async def assign_student_to_class(body: EnrollmentAssign, db: AsyncSession = Depends(get_db)):
    if not body.student_email or not body.class_id:
        raise ValidationError("Student email and Class ID are required")

    service = EnrollmentService(db)
    enrollment = await service.assign_by_email(body.student_email, body.class_id)
    return {"message": "Student assigned to class successfully", "enrollment": enrollment_to_dict(enrollment)}


@router.delete("/{id}", dependencies=[Depends(require_admin)])
async def delete_enrollment(id: UUID, db: AsyncSession = Depends(get_db)):
    service = EnrollmentService(db)
    await service.unenroll(id)
    return {"message": "Enrollment deleted successfully"}
