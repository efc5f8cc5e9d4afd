# schoolhub/models/teacher.py
from sqlalchemy import Column, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from .base import Base

class Teacher(Base):
    __tablename__ = "teachers"

    user_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False)

    # Relationships
    user = relationship("User", back_populates="teacher")
    classes = relationship("ClassModel", back_populates="teacher")
    exams = relationship("Exam", back_populates="teacher")
    timetable_entries = relationship("TimetableEntry", back_populates="teacher")
