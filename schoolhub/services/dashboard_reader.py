# schoolhub/services/dashboard_reader.py
"""Read queries behind the role dashboards.

Each method opens its own session from the factory so the dashboard service
can run several of them concurrently; an AsyncSession must not be shared
between concurrent awaits. Methods return JSON-ready dicts.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlalchemy.orm import selectinload

from ..models.attendance import Attendance
from ..models.class_model import ClassModel
from ..models.enrollment import Enrollment
from ..models.exam import Exam
from ..models.grade import Grade
from ..models.parent import Parent
from ..models.student import Student
from ..models.subject import Subject
from ..models.teacher import Teacher
from ..models.timetable import TimetableEntry
from ..models.user import Role, User
from ..utils.formatting import (
    class_brief, enum_value, iso, subject_brief, uid, user_brief
)


class DashboardReader:
    def __init__(self, session_factory: async_sessionmaker):
        self.session_factory = session_factory

    async def _scalar(self, stmt):
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return result.scalar()

    async def _scalars(self, stmt) -> Sequence[Any]:
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return result.scalars().all()

    async def _rows(self, stmt) -> Sequence[Any]:
        async with self.session_factory() as session:
            result = await session.execute(stmt)
            return result.all()

    # Admin

    async def count_users(self, role: Role) -> int:
        return await self._scalar(select(func.count(User.id)).where(User.role == role))

    async def count_classes(self) -> int:
        return await self._scalar(select(func.count(ClassModel.id)))

    async def count_subjects(self) -> int:
        return await self._scalar(select(func.count(Subject.id)))

    async def recent_users(self, since: datetime, limit: int) -> List[Dict[str, Any]]:
        stmt = (
            select(User)
            .where(User.created_at >= since)
            .order_by(User.created_at.desc())
            .limit(limit)
        )
        return [
            {
                "id": uid(user.id),
                "fullName": user.full_name,
                "email": user.email,
                "role": enum_value(user.role),
                "createdAt": iso(user.created_at),
            }
            for user in await self._scalars(stmt)
        ]

    async def recent_enrollments(self, limit: int) -> List[Dict[str, Any]]:
        stmt = (
            select(Enrollment)
            .options(
                selectinload(Enrollment.student).selectinload(Student.user),
                selectinload(Enrollment.class_ref),
            )
            .order_by(Enrollment.created_at.desc())
            .limit(limit)
        )
        return [
            {
                "id": uid(enrollment.id),
                "createdAt": iso(enrollment.created_at),
                "student": {"user": {"fullName": enrollment.student.user.full_name}},
                "class": {"name": enrollment.class_ref.name},
            }
            for enrollment in await self._scalars(stmt)
        ]

    # Teacher

    async def teacher_classes(self, teacher_id: UUID) -> List[Dict[str, Any]]:
        student_count = (
            select(func.count(Student.id))
            .where(Student.class_id == ClassModel.id)
            .correlate(ClassModel)
            .scalar_subquery()
        )
        stmt = (
            select(ClassModel.id, ClassModel.name, ClassModel.level, student_count.label("student_count"))
            .where(ClassModel.teacher_id == teacher_id)
            .order_by(ClassModel.name)
        )
        return [
            {
                "id": uid(row.id),
                "name": row.name,
                "level": row.level,
                "_count": {"students": row.student_count},
            }
            for row in await self._rows(stmt)
        ]

    async def count_teacher_students(self, teacher_id: UUID) -> int:
        stmt = (
            select(func.count(Student.id))
            .join(ClassModel, Student.class_id == ClassModel.id)
            .where(ClassModel.teacher_id == teacher_id)
        )
        return await self._scalar(stmt)

    async def upcoming_teacher_exams(self, teacher_id: UUID, now: datetime, limit: int) -> List[Dict[str, Any]]:
        stmt = (
            select(Exam)
            .options(selectinload(Exam.class_ref), selectinload(Exam.subject))
            .where(Exam.teacher_id == teacher_id, Exam.date >= now)
            .order_by(Exam.date.asc())
            .limit(limit)
        )
        return [self._exam(exam, with_class=True) for exam in await self._scalars(stmt)]

    async def recent_teacher_attendance(self, teacher_id: UUID, limit: int) -> List[Dict[str, Any]]:
        stmt = (
            select(Attendance)
            .join(ClassModel, Attendance.class_id == ClassModel.id)
            .options(
                selectinload(Attendance.student).selectinload(Student.user),
                selectinload(Attendance.class_ref),
            )
            .where(ClassModel.teacher_id == teacher_id)
            .order_by(Attendance.date.desc())
            .limit(limit)
        )
        return [
            {
                "id": uid(record.id),
                "date": iso(record.date),
                "status": enum_value(record.status),
                "student": {"user": {"fullName": record.student.user.full_name}},
                "class": {"name": record.class_ref.name},
            }
            for record in await self._scalars(stmt)
        ]

    async def teacher_timetable(self, teacher_id: UUID, limit: int) -> List[Dict[str, Any]]:
        stmt = (
            select(TimetableEntry)
            .options(selectinload(TimetableEntry.class_ref), selectinload(TimetableEntry.subject))
            .where(TimetableEntry.teacher_id == teacher_id)
            .order_by(TimetableEntry.day.asc(), TimetableEntry.start_time.asc())
            .limit(limit)
        )
        return [self._timetable(entry, with_class=True) for entry in await self._scalars(stmt)]

    # Student

    async def student_profile(self, student_id: UUID) -> Optional[Dict[str, Any]]:
        stmt = (
            select(Student)
            .options(
                selectinload(Student.user),
                selectinload(Student.class_ref).selectinload(ClassModel.teacher).selectinload(Teacher.user),
                selectinload(Student.parent).selectinload(Parent.user),
            )
            .where(Student.id == student_id)
        )
        students = await self._scalars(stmt)
        if not students:
            return None
        student = students[0]

        class_info = None
        if student.class_ref is not None:
            teacher = student.class_ref.teacher
            class_info = {
                **class_brief(student.class_ref),
                "teacher": {"user": {"fullName": teacher.user.full_name}} if teacher else None,
            }
        return {
            "id": uid(student.id),
            "classId": uid(student.class_id),
            "user": user_brief(student.user),
            "class": class_info,
            "parent": {"user": user_brief(student.parent.user)} if student.parent else None,
        }

    async def attendance_status_counts(self, student_ids: List[UUID]) -> List[Tuple[str, str, int]]:
        """(studentId, status, count) rows grouped by student and status"""
        if not student_ids:
            return []
        stmt = (
            select(Attendance.student_id, Attendance.status, func.count(Attendance.id))
            .where(Attendance.student_id.in_(student_ids))
            .group_by(Attendance.student_id, Attendance.status)
        )
        return [(uid(student_id), enum_value(status), count) for student_id, status, count in await self._rows(stmt)]

    async def recent_grades(self, student_ids: List[UUID], limit: int, with_student: bool = False) -> List[Dict[str, Any]]:
        if not student_ids:
            return []
        options = [selectinload(Grade.exam), selectinload(Grade.subject)]
        if with_student:
            options.append(selectinload(Grade.student).selectinload(Student.user))
        stmt = (
            select(Grade)
            .join(Exam, Grade.exam_id == Exam.id)
            .options(*options)
            .where(Grade.student_id.in_(student_ids))
            .order_by(Exam.date.desc())
            .limit(limit)
        )
        grades = []
        for grade in await self._scalars(stmt):
            item = {
                "id": uid(grade.id),
                "marks": grade.marks,
                "exam": {"name": grade.exam.name, "date": iso(grade.exam.date)},
                "subject": {"name": grade.subject.name},
            }
            if with_student:
                item["student"] = {"user": {"fullName": grade.student.user.full_name}}
            grades.append(item)
        return grades

    async def upcoming_class_exams(self, class_ids: List[UUID], now: datetime, limit: int,
                                   with_class: bool = False) -> List[Dict[str, Any]]:
        stmt = (
            select(Exam)
            .options(selectinload(Exam.class_ref), selectinload(Exam.subject))
            .where(Exam.class_id.in_(class_ids), Exam.date >= now)
            .order_by(Exam.date.asc())
            .limit(limit)
        )
        return [self._exam(exam, with_class=with_class) for exam in await self._scalars(stmt)]

    async def class_timetable(self, class_id: UUID) -> List[Dict[str, Any]]:
        stmt = (
            select(TimetableEntry)
            .options(selectinload(TimetableEntry.subject))
            .where(TimetableEntry.class_id == class_id)
            .order_by(TimetableEntry.day.asc(), TimetableEntry.start_time.asc())
        )
        return [self._timetable(entry, with_class=False) for entry in await self._scalars(stmt)]

    async def class_subjects(self, class_id: UUID) -> Dict[str, List[Dict[str, Any]]]:
        stmt = select(Subject).where(Subject.class_id == class_id).order_by(Subject.name)
        return {"subjects": [subject_brief(subject) for subject in await self._scalars(stmt)]}

    # Parent

    async def parent_children(self, parent_id: UUID) -> List[Dict[str, Any]]:
        stmt = (
            select(Student)
            .options(selectinload(Student.user), selectinload(Student.class_ref))
            .where(Student.parent_id == parent_id)
        )
        return [
            {
                "id": uid(child.id),
                "classId": uid(child.class_id),
                "user": user_brief(child.user),
                "class": {"name": child.class_ref.name, "level": child.class_ref.level} if child.class_ref else None,
            }
            for child in await self._scalars(stmt)
        ]

    async def parent_profile(self, parent_id: UUID) -> Optional[Dict[str, Any]]:
        stmt = select(Parent).options(selectinload(Parent.user)).where(Parent.id == parent_id)
        parents = await self._scalars(stmt)
        if not parents:
            return None
        return {"user": user_brief(parents[0].user)}

    @staticmethod
    def _exam(exam: Exam, with_class: bool) -> Dict[str, Any]:
        data = {
            "id": uid(exam.id),
            "name": exam.name,
            "date": iso(exam.date),
            "subject": {"name": exam.subject.name},
        }
        if with_class:
            data["class"] = {"name": exam.class_ref.name}
        return data

    @staticmethod
    def _timetable(entry: TimetableEntry, with_class: bool) -> Dict[str, Any]:
        data = {
            "id": uid(entry.id),
            "day": enum_value(entry.day),
            "startTime": entry.start_time,
            "endTime": entry.end_time,
            "subject": {"name": entry.subject.name},
        }
        if with_class:
            data["class"] = {"name": entry.class_ref.name}
        return data
