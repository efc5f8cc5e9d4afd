# schoolhub/models/exam.py
from sqlalchemy import Column, String, DateTime, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from .base import Base

class Exam(Base):
    __tablename__ = "exams"

    name = Column(String(200), nullable=False)
    date = Column(DateTime(timezone=True), nullable=False, index=True)

    # Foreign Keys
    class_id = Column(Uuid, ForeignKey("classes.id", ondelete="CASCADE"), nullable=False, index=True)
    subject_id = Column(Uuid, ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False, index=True)
    teacher_id = Column(Uuid, ForeignKey("teachers.id", ondelete="CASCADE"), nullable=False, index=True)

    # Relationships
    class_ref = relationship("ClassModel", back_populates="exams")
    subject = relationship("Subject")
    teacher = relationship("Teacher", back_populates="exams")
    grades = relationship("Grade", back_populates="exam", cascade="all, delete-orphan")
