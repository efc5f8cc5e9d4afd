# schoolhub/models/__init__.py
"""Import all models here so Alembic and the mapper registry see every table."""
from .base import Base

from .user import User, Role
from .student import Student
from .teacher import Teacher
from .parent import Parent
from .class_model import ClassModel
from .subject import Subject
from .enrollment import Enrollment
from .attendance import Attendance, AttendanceStatus
from .exam import Exam
from .grade import Grade
from .timetable import TimetableEntry, Weekday
from .notification import Notification, NotificationType
