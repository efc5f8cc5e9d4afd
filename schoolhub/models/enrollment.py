# schoolhub/models/enrollment.py
from sqlalchemy import Column, ForeignKey, Uuid, UniqueConstraint
from sqlalchemy.orm import relationship
from .base import Base

class Enrollment(Base):
    __tablename__ = "enrollments"

    # Foreign Keys
    student_id = Column(Uuid, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)
    class_id = Column(Uuid, ForeignKey("classes.id", ondelete="CASCADE"), nullable=False, index=True)

    __table_args__ = (
        UniqueConstraint("student_id", "class_id", name="uq_enrollment_student_class"),
    )

    # Relationships
    student = relationship("Student", back_populates="enrollments")
    class_ref = relationship("ClassModel", back_populates="enrollments")
