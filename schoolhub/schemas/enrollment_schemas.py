# schoolhub/schemas/enrollment_schemas.py
from typing import Optional
from uuid import UUID
from pydantic import Field

from .auth_schemas import CamelModel


class EnrollmentCreate(CamelModel):
    student_id: Optional[UUID] = Field(default=None, alias="studentId")
    class_id: Optional[UUID] = Field(default=None, alias="classId")


class EnrollmentAssign(CamelModel):
    student_email: Optional[str] = Field(default=None, alias="studentEmail")
    class_id: Optional[UUID] = Field(default=None, alias="classId")
