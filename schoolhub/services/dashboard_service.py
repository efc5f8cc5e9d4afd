# schoolhub/services/dashboard_service.py
"""Role-shaped dashboard views.

Each view resolves what later reads depend on (the teacher's classes, the
student's class, the parent's children) and then issues the remaining reads
concurrently. Class-scoped reads are never issued for a caller without a class.
"""
import asyncio
import functools
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Awaitable, Callable, Dict, List
from uuid import UUID

from ..core.caller import (
    Caller, AdminCaller, TeacherCaller, StudentCaller, ParentCaller
)
from ..core.exceptions import (
    SchoolHubException, NotFoundError, UnhandledError, ValidationError
)
from ..models.user import Role
from .dashboard_reader import DashboardReader
from .statistics import percentage_from_status_counts

logger = logging.getLogger(__name__)

RECENT_USERS_WINDOW = timedelta(days=7)
RECENT_LIMIT = 10
UPCOMING_EXAMS_LIMIT = 5
RECENT_ATTENDANCE_LIMIT = 5
STUDENT_RECENT_GRADES_LIMIT = 5
TEACHER_TIMETABLE_LIMIT = 10


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


async def _empty(value: Any = None) -> Any:
    return [] if value is None else value


async def _fan_out(*reads: Awaitable[Any]) -> List[Any]:
    """Run reads concurrently; on the first failure cancel and drain the rest"""
    tasks = [asyncio.ensure_future(read) for read in reads]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            if not task.done():
                task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


def dashboard_operation(func: Callable[..., Awaitable[Dict[str, Any]]]):
    """Log and wrap unexpected failures so the boundary answers with a 500"""
    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except SchoolHubException:
            raise
        except Exception as e:
            logger.exception(f"Error in {func.__name__}: {type(e).__name__}: {e}")
            raise UnhandledError(func.__name__, e)
    return wrapper


class DashboardService:
    def __init__(self, reader: DashboardReader, clock: Callable[[], datetime] = _utcnow):
        self.reader = reader
        self.clock = clock

    @dashboard_operation
    async def dispatch(self, caller: Caller) -> Dict[str, Any]:
        logger.info(f"Dashboard request for role: {caller.role}")
        if isinstance(caller, AdminCaller):
            return await self.admin_view()
        if isinstance(caller, TeacherCaller):
            return await self.teacher_view(caller)
        if isinstance(caller, StudentCaller):
            return await self.student_view(caller)
        if isinstance(caller, ParentCaller):
            return await self.parent_view(caller)
        raise ValidationError(f"Invalid user role: {caller.role}")

    @dashboard_operation
    async def admin_view(self) -> Dict[str, Any]:
        since = self.clock() - RECENT_USERS_WINDOW
        (
            total_students,
            total_teachers,
            total_parents,
            total_classes,
            total_subjects,
            recent_users,
            recent_enrollments,
        ) = await _fan_out(
            self.reader.count_users(Role.STUDENT),
            self.reader.count_users(Role.TEACHER),
            self.reader.count_users(Role.PARENT),
            self.reader.count_classes(),
            self.reader.count_subjects(),
            self.reader.recent_users(since, RECENT_LIMIT),
            self.reader.recent_enrollments(RECENT_LIMIT),
        )
        return {
            "summary": {
                "totalStudents": total_students,
                "totalTeachers": total_teachers,
                "totalParents": total_parents,
                "totalClasses": total_classes,
                "totalSubjects": total_subjects,
            },
            "recentActivity": {
                "newUsers": recent_users,
                "newEnrollments": recent_enrollments,
            },
        }

    @dashboard_operation
    async def teacher_view(self, caller: TeacherCaller) -> Dict[str, Any]:
        teacher_id = caller.require_profile()
        now = self.clock()

        my_classes = await self.reader.teacher_classes(teacher_id)
        has_classes = len(my_classes) > 0

        total_students, upcoming_exams, recent_attendance, timetable = await _fan_out(
            self.reader.count_teacher_students(teacher_id),
            self.reader.upcoming_teacher_exams(teacher_id, now, UPCOMING_EXAMS_LIMIT) if has_classes else _empty(),
            self.reader.recent_teacher_attendance(teacher_id, RECENT_ATTENDANCE_LIMIT) if has_classes else _empty(),
            self.reader.teacher_timetable(teacher_id, TEACHER_TIMETABLE_LIMIT),
        )
        return {
            "summary": {
                "totalClasses": len(my_classes),
                "totalStudents": total_students,
                "upcomingExams": len(upcoming_exams),
            },
            "myClasses": my_classes,
            "upcomingExams": upcoming_exams,
            "recentAttendance": recent_attendance,
            "timetable": timetable,
        }

    @dashboard_operation
    async def student_view(self, caller: StudentCaller) -> Dict[str, Any]:
        student_id = caller.require_profile()
        now = self.clock()

        student_info = await self.reader.student_profile(student_id)
        if student_info is None:
            logger.error(f"Student record not found for studentId: {student_id}")
            raise NotFoundError("Student")

        class_id = UUID(student_info["classId"]) if student_info.get("classId") else None
        has_class = class_id is not None

        status_counts, recent_grades, upcoming_exams, timetable, class_info = await _fan_out(
            self.reader.attendance_status_counts([student_id]),
            self.reader.recent_grades([student_id], STUDENT_RECENT_GRADES_LIMIT),
            self.reader.upcoming_class_exams([class_id], now, UPCOMING_EXAMS_LIMIT) if has_class else _empty(),
            self.reader.class_timetable(class_id) if has_class else _empty(),
            self.reader.class_subjects(class_id) if has_class else _empty({"subjects": []}),
        )

        attendance = [{"status": status, "count": count} for _, status, count in status_counts]
        subjects = (class_info or {}).get("subjects") or []
        upcoming_exams = upcoming_exams or []
        return {
            "studentInfo": student_info,
            "summary": {
                "attendancePercentage": percentage_from_status_counts(
                    (status, count) for _, status, count in status_counts
                ),
                "totalSubjects": len(subjects),
                "upcomingExams": len(upcoming_exams),
                "hasClass": has_class,
            },
            "attendance": attendance,
            "recentGrades": recent_grades,
            "upcomingExams": upcoming_exams,
            "timetable": timetable or [],
            "subjects": subjects,
        }

    @dashboard_operation
    async def parent_view(self, caller: ParentCaller) -> Dict[str, Any]:
        parent_id = caller.require_profile()
        now = self.clock()

        children = await self.reader.parent_children(parent_id)
        children_ids = [UUID(child["id"]) for child in children]
        class_ids: List[UUID] = []
        for child in children:
            if child.get("classId"):
                class_id = UUID(child["classId"])
                if class_id not in class_ids:
                    class_ids.append(class_id)

        parent_info, status_counts, recent_grades, upcoming_exams = await _fan_out(
            self.reader.parent_profile(parent_id),
            self.reader.attendance_status_counts(children_ids),
            self.reader.recent_grades(children_ids, RECENT_LIMIT, with_student=True),
            self.reader.upcoming_class_exams(class_ids, now, UPCOMING_EXAMS_LIMIT, with_class=True)
            if class_ids else _empty(),
        )

        children_with_attendance = []
        for child in children:
            own_counts = [(status, count) for student_id, status, count in status_counts
                          if student_id == child["id"]]
            children_with_attendance.append({
                **child,
                "attendancePercentage": percentage_from_status_counts(own_counts),
            })

        return {
            "parentInfo": parent_info,
            "summary": {
                "totalChildren": len(children),
                "totalUpcomingExams": len(upcoming_exams),
            },
            "children": children_with_attendance,
            "recentGrades": recent_grades,
            "upcomingExams": upcoming_exams,
        }
