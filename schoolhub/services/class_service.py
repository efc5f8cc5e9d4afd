# schoolhub/services/class_service.py
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.orm import selectinload

from .base_service import BaseService
from ..core.exceptions import NotFoundError
from ..models.class_model import ClassModel
from ..models.exam import Exam
from ..models.grade import Grade
from ..models.parent import Parent
from ..models.student import Student
from ..models.subject import Subject
from ..models.teacher import Teacher
from ..models.timetable import TimetableEntry, Weekday
from ..models.user import User
from ..utils.formatting import (
    class_brief, enum_value, exam_to_dict, iso, subject_brief, uid, user_brief
)


WEEKDAY_ORDER = {day.value: index for index, day in enumerate(Weekday)}


def _teacher_brief(teacher) -> Optional[Dict[str, Any]]:
    if teacher is None:
        return None
    return {"id": uid(teacher.id), "user": user_brief(teacher.user)}


def _student_with_parent(student) -> Dict[str, Any]:
    return {
        "id": uid(student.id),
        "classId": uid(student.class_id),
        "user": user_brief(student.user),
        "parent": {"id": uid(student.parent.id), "user": user_brief(student.parent.user)}
        if student.parent else None,
    }


class ClassService(BaseService[ClassModel]):
    def __init__(self, db: AsyncSession):
        super().__init__(ClassModel, db)

    async def get_class(self, class_id: UUID) -> Dict[str, Any]:
        stmt = (
            select(ClassModel)
            .options(
                selectinload(ClassModel.teacher).selectinload(Teacher.user),
                selectinload(ClassModel.students).selectinload(Student.user),
                selectinload(ClassModel.students).selectinload(Student.parent).selectinload(Parent.user),
                selectinload(ClassModel.subjects),
                selectinload(ClassModel.timetable_entries).selectinload(TimetableEntry.subject),
                selectinload(ClassModel.timetable_entries)
                .selectinload(TimetableEntry.teacher).selectinload(Teacher.user),
            )
            .where(ClassModel.id == class_id)
        )
        result = await self.db.execute(stmt)
        class_obj = result.scalar_one_or_none()
        if not class_obj:
            raise NotFoundError("Class")

        timetable = sorted(
            class_obj.timetable_entries,
            key=lambda e: (WEEKDAY_ORDER[enum_value(e.day)], e.start_time)
        )
        return {
            **class_brief(class_obj),
            "teacherId": uid(class_obj.teacher_id),
            "teacher": _teacher_brief(class_obj.teacher),
            "students": [_student_with_parent(s) for s in class_obj.students],
            "subjects": [subject_brief(s) for s in class_obj.subjects],
            "timetable": [
                {
                    "id": uid(entry.id),
                    "day": enum_value(entry.day),
                    "startTime": entry.start_time,
                    "endTime": entry.end_time,
                    "subject": {"name": entry.subject.name},
                    "teacher": {"user": {"fullName": entry.teacher.user.full_name}} if entry.teacher else None,
                }
                for entry in timetable
            ],
            "createdAt": iso(class_obj.created_at),
        }

    async def class_students(self, class_id: UUID) -> List[Dict[str, Any]]:
        """Students of a class by name, each with parent and grades"""
        stmt = (
            select(Student)
            .join(User, Student.user_id == User.id)
            .options(
                selectinload(Student.user),
                selectinload(Student.parent).selectinload(Parent.user),
                selectinload(Student.grades).selectinload(Grade.subject),
                selectinload(Student.grades).selectinload(Grade.exam),
            )
            .where(Student.class_id == class_id)
            .order_by(User.full_name.asc())
        )
        result = await self.db.execute(stmt)
        return [
            {
                **_student_with_parent(student),
                "grades": [
                    {
                        "id": uid(grade.id),
                        "marks": grade.marks,
                        "subject": {"name": grade.subject.name},
                        "exam": {"name": grade.exam.name},
                    }
                    for grade in student.grades
                ],
            }
            for student in result.scalars().all()
        ]

    async def class_subjects(self, class_id: UUID) -> List[Dict[str, Any]]:
        timetable_count = (
            select(func.count(TimetableEntry.id))
            .where(TimetableEntry.subject_id == Subject.id)
            .correlate(Subject)
            .scalar_subquery()
        )
        exam_count = (
            select(func.count(Exam.id))
            .where(Exam.subject_id == Subject.id)
            .correlate(Subject)
            .scalar_subquery()
        )
        stmt = (
            select(Subject, timetable_count.label("timetable"), exam_count.label("exams"))
            .where(Subject.class_id == class_id)
            .order_by(Subject.name.asc())
        )
        result = await self.db.execute(stmt)
        return [
            {
                **subject_brief(subject),
                "classId": uid(subject.class_id),
                "_count": {"timetable": timetable, "exams": exams},
            }
            for subject, timetable, exams in result.all()
        ]

    async def class_exams(self, class_id: UUID) -> List[Dict[str, Any]]:
        grade_count = (
            select(func.count(Grade.id))
            .where(Grade.exam_id == Exam.id)
            .correlate(Exam)
            .scalar_subquery()
        )
        stmt = (
            select(Exam, grade_count.label("grades"))
            .options(
                selectinload(Exam.subject),
                selectinload(Exam.teacher).selectinload(Teacher.user),
            )
            .where(Exam.class_id == class_id)
            .order_by(Exam.date.asc())
        )
        result = await self.db.execute(stmt)
        return [
            {
                **exam_to_dict(exam, include_class=False),
                "teacher": {"user": {"fullName": exam.teacher.user.full_name}} if exam.teacher else None,
                "_count": {"grades": grades},
            }
            for exam, grades in result.all()
        ]
