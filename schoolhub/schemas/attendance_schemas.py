# schoolhub/schemas/attendance_schemas.py
from typing import Optional
from datetime import date
from uuid import UUID
from pydantic import Field

from .auth_schemas import CamelModel


class AttendanceCreate(CamelModel):
    student_id: Optional[UUID] = Field(default=None, alias="studentId")
    class_id: Optional[UUID] = Field(default=None, alias="classId")
    attendance_date: Optional[date] = Field(default=None, alias="date")
    status: Optional[str] = None


class AttendanceUpdate(CamelModel):
    status: Optional[str] = None
