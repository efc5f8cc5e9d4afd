# schoolhub/models/grade.py
from sqlalchemy import Column, Integer, ForeignKey, Uuid, UniqueConstraint
from sqlalchemy.orm import relationship
from .base import Base

class Grade(Base):
    __tablename__ = "grades"

    # Foreign Keys
    exam_id = Column(Uuid, ForeignKey("exams.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(Uuid, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    subject_id = Column(Uuid, ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False, index=True)

    marks = Column(Integer, nullable=False)

    __table_args__ = (
        UniqueConstraint("student_id", "exam_id", "subject_id", name="uq_grade_student_exam_subject"),
    )

    # Relationships
    exam = relationship("Exam", back_populates="grades")
    student = relationship("Student", back_populates="grades")
    subject = relationship("Subject")
