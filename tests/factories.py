# tests/factories.py
"""Helpers that insert rows directly and mint tokens for them."""
from datetime import date, datetime, timezone
from typing import Dict, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from schoolhub.core.security import create_access_token, hash_password
from schoolhub.models import (
    Attendance, AttendanceStatus, ClassModel, Exam, Grade, Parent, Role, Student,
    Subject, Teacher, TimetableEntry, User, Weekday
)

PASSWORD = "password123"


async def make_user(db: AsyncSession, role: Role, email: str, full_name: Optional[str] = None,
                    with_profile: bool = True, **profile_fields):
    """Insert a user and, unless told otherwise, its role profile; returns (user, profile)"""
    user = User(
        email=email,
        password_hash=hash_password(PASSWORD),
        full_name=full_name or email.split("@")[0].title(),
        role=role,
    )
    db.add(user)
    await db.flush()

    profile = None
    if with_profile:
        if role == Role.STUDENT:
            profile = Student(user_id=user.id, **profile_fields)
        elif role == Role.TEACHER:
            profile = Teacher(user_id=user.id)
        elif role == Role.PARENT:
            profile = Parent(user_id=user.id)
        if profile is not None:
            db.add(profile)
    await db.commit()
    return user, profile


def auth_headers(user: User) -> Dict[str, str]:
    token = create_access_token({
        "id": str(user.id),
        "email": user.email,
        "fullName": user.full_name,
        "role": user.role.value,
    })
    return {"Authorization": f"Bearer {token}"}


async def make_class(db: AsyncSession, name: str, teacher: Optional[Teacher] = None, level: str = "Grade 5"):
    class_obj = ClassModel(name=name, level=level, teacher_id=teacher.id if teacher else None)
    db.add(class_obj)
    await db.commit()
    return class_obj


async def make_subject(db: AsyncSession, class_obj: ClassModel, name: str = "Mathematics", code: str = "MATH"):
    subject = Subject(name=name, code=code, class_id=class_obj.id)
    db.add(subject)
    await db.commit()
    return subject


async def make_exam(db: AsyncSession, class_obj: ClassModel, subject: Subject, teacher: Teacher,
                    when: datetime, name: str = "Midterm"):
    exam = Exam(name=name, date=when, class_id=class_obj.id, subject_id=subject.id, teacher_id=teacher.id)
    db.add(exam)
    await db.commit()
    return exam


async def make_grade(db: AsyncSession, exam: Exam, student: Student, marks: int):
    grade = Grade(exam_id=exam.id, student_id=student.id, subject_id=exam.subject_id, marks=marks)
    db.add(grade)
    await db.commit()
    return grade


async def make_attendance(db: AsyncSession, student: Student, class_obj: ClassModel,
                          on: date, status: AttendanceStatus):
    record = Attendance(student_id=student.id, class_id=class_obj.id, date=on, status=status)
    db.add(record)
    await db.commit()
    return record


async def make_timetable(db: AsyncSession, class_obj: ClassModel, subject: Subject, teacher: Teacher,
                         day: Weekday = Weekday.MONDAY, start: str = "09:00", end: str = "10:00"):
    entry = TimetableEntry(class_id=class_obj.id, subject_id=subject.id, teacher_id=teacher.id,
                           day=day, start_time=start, end_time=end)
    db.add(entry)
    await db.commit()
    return entry


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)
