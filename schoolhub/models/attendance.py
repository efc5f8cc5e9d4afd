# schoolhub/models/attendance.py
from sqlalchemy import Column, Date, Enum, ForeignKey, Uuid, Index
from sqlalchemy.orm import relationship
from .base import Base
import enum


class AttendanceStatus(str, enum.Enum):
    PRESENT = "PRESENT"
    ABSENT = "ABSENT"
    LATE = "LATE"
    EXCUSED = "EXCUSED"


class Attendance(Base):
    __tablename__ = "attendance"

    # Foreign Keys
    student_id = Column(Uuid, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    class_id = Column(Uuid, ForeignKey("classes.id", ondelete="CASCADE"), nullable=False, index=True)

    # One record per (student, date) is checked on write, not enforced here
    date = Column(Date, nullable=False, index=True)
    status = Column(Enum(AttendanceStatus, name="attendance_status"), nullable=False)

    __table_args__ = (
        Index("ix_attendance_student_date", "student_id", "date"),
    )

    # Relationships
    student = relationship("Student", back_populates="attendances")
    class_ref = relationship("ClassModel", back_populates="attendances")
