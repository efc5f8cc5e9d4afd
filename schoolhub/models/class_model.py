# schoolhub/models/class_model.py
from sqlalchemy import Column, String, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from .base import Base


class ClassModel(Base):
    __tablename__ = "classes"

    # Class Information
    name = Column(String(100), nullable=False, index=True)
    level = Column(String(50), nullable=False)

    # Foreign Keys
    teacher_id = Column(Uuid, ForeignKey("teachers.id", ondelete="SET NULL"), nullable=True, index=True)

    # Relationships
    teacher = relationship("Teacher", back_populates="classes")
    students = relationship("Student", back_populates="class_ref")
    subjects = relationship("Subject", back_populates="class_ref")
    enrollments = relationship("Enrollment", back_populates="class_ref", cascade="all, delete-orphan")
    attendances = relationship("Attendance", back_populates="class_ref")
    exams = relationship("Exam", back_populates="class_ref")
    timetable_entries = relationship("TimetableEntry", back_populates="class_ref")
