# schoolhub/models/timetable.py
from sqlalchemy import Column, String, Enum, ForeignKey, Uuid
from sqlalchemy.orm import relationship
from .base import Base
import enum


class Weekday(str, enum.Enum):
    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"
    FRIDAY = "FRIDAY"
    SATURDAY = "SATURDAY"
    SUNDAY = "SUNDAY"


class TimetableEntry(Base):
    __tablename__ = "timetable"

    class_id = Column(Uuid, ForeignKey("classes.id", ondelete="CASCADE"), nullable=False, index=True)
    subject_id = Column(Uuid, ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False)
    teacher_id = Column(Uuid, ForeignKey("teachers.id", ondelete="CASCADE"), nullable=False, index=True)

    day = Column(Enum(Weekday, name="weekday"), nullable=False)
    start_time = Column(String(5), nullable=False)  # HH:MM
    end_time = Column(String(5), nullable=False)

    class_ref = relationship("ClassModel", back_populates="timetable_entries")
    subject = relationship("Subject")
    teacher = relationship("Teacher", back_populates="timetable_entries")
