# schoolhub/schemas/grade_schemas.py
from typing import Optional
from uuid import UUID
from pydantic import Field

from .auth_schemas import CamelModel


class GradeCreate(CamelModel):
    exam_id: Optional[UUID] = Field(default=None, alias="examId")
    student_id: Optional[UUID] = Field(default=None, alias="studentId")
    subject_id: Optional[UUID] = Field(default=None, alias="subjectId")
    marks: Optional[int] = Field(default=None, ge=0)


class GradeUpdate(CamelModel):
    marks: Optional[int] = Field(default=None, ge=0)
