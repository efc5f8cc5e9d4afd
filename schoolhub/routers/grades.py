# schoolhub/routers/grades.py
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.auth_dependencies import require_ownership, require_teacher_or_admin
from ..core.database import get_db
from ..core.exceptions import ValidationError
from ..schemas.grade_schemas import GradeCreate, GradeUpdate
from ..services.grades_service import GradesService
from ..utils.formatting import grade_to_dict
from ..utils.pagination import PaginationParams, Paginator

router = APIRouter(prefix="/api/grades", tags=["Grades"])


@router.get("", dependencies=[Depends(require_teacher_or_admin)])
async def list_grades(
    exam_id: Optional[UUID] = Query(None, alias="examId"),
    student_id: Optional[UUID] = Query(None, alias="studentId"),
    subject_id: Optional[UUID] = Query(None, alias="subjectId"),
    pagination: PaginationParams = Depends(Paginator.get_pagination_params),
    db: AsyncSession = Depends(get_db)
):
    service = GradesService(db)
    grades, total = await service.list_grades(
        pagination, exam_id=exam_id, student_id=student_id, subject_id=subject_id
    )
    return {
        "grades": [grade_to_dict(grade) for grade in grades],
        "pagination": Paginator.create_meta(pagination, total),
    }


@router.get("/student/{student_id}", dependencies=[Depends(require_ownership("student", "student_id"))])
async def get_student_grades(
    student_id: UUID,
    subject_id: Optional[UUID] = Query(None, alias="subjectId"),
    db: AsyncSession = Depends(get_db)
):
    """A student's grades with the average mark"""
    service = GradesService(db)
    result = await service.student_grades(student_id, subject_id)
    return {
        **result,
        "grades": [grade_to_dict(grade, include_student=False) for grade in result["grades"]],
    }


@router.get("/exam/{exam_id}", dependencies=[Depends(require_teacher_or_admin)])
async def get_exam_grades(exam_id: UUID, db: AsyncSession = Depends(get_db)):
    """All grades of an exam by student name, with exam statistics"""
    service = GradesService(db)
    result = await service.exam_grades(exam_id)
    return {
        **result,
        "grades": [grade_to_dict(grade, include_exam=False) for grade in result["grades"]],
    }


@router.get("/{id}", dependencies=[Depends(require_ownership("grade"))])
async def get_grade(id: UUID, db: AsyncSession = Depends(get_db)):
    service = GradesService(db)
    return {"grade": grade_to_dict(await service.get_detailed(id))}


@router.post("", status_code=201, dependencies=[Depends(require_teacher_or_admin)])
async def create_grade(body: GradeCreate, db: AsyncSession = Depends(get_db)):
    if not body.exam_id or not body.student_id or not body.subject_id or body.marks is None:
        raise ValidationError("Exam ID, Student ID, Subject ID, and marks are required")

    service = GradesService(db)
    grade = await service.create_grade(body.exam_id, body.student_id, body.subject_id, body.marks)
    return {"message": "Grade created successfully", "grade": grade_to_dict(grade)}


@router.put("/{id}", dependencies=[Depends(require_teacher_or_admin)])
async def update_grade(id: UUID, body: GradeUpdate, db: AsyncSession = Depends(get_db)):
    service = GradesService(db)
    grade = await service.update_marks(id, body.marks)
    return {"message": "Grade updated successfully", "grade": grade_to_dict(grade)}


@router.delete("/{id}", dependencies=[Depends(require_teacher_or_admin)])
async def delete_grade(id: UUID, db: AsyncSession = Depends(get_db)):
    service = GradesService(db)
    await service.delete_grade(id)
    return {"message": "Grade deleted successfully"}
