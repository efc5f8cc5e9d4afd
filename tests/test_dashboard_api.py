# tests/test_dashboard_api.py
from datetime import date, datetime, timedelta, timezone

import pytest

from schoolhub.core.config import settings
from schoolhub.models import AttendanceStatus, Role
from schoolhub.routers.dashboard import get_dashboard_service
from schoolhub.main import app
from tests.factories import (
    auth_headers, make_attendance, make_class, make_exam, make_grade, make_subject,
    make_timetable, make_user
)

pytestmark = pytest.mark.anyio


def soon(days: int) -> datetime:
    return datetime.now(timezone.utc) + timedelta(days=days)


@pytest.fixture
async def school(anyio_backend, db):
    admin_user, _ = await make_user(db, Role.ADMIN, "ada@school.test", "Ada")
    teacher_user, teacher = await make_user(db, Role.TEACHER, "tina@school.test", "Tina")
    parent_user, parent = await make_user(db, Role.PARENT, "pat@school.test", "Pat")
    class_obj = await make_class(db, "5A", teacher)
    subject = await make_subject(db, class_obj)
    sam_user, sam = await make_user(db, Role.STUDENT, "sam@school.test", "Sam",
                                    class_id=class_obj.id, parent_id=parent.id)
    ben_user, ben = await make_user(db, Role.STUDENT, "ben@school.test", "Ben", parent_id=parent.id)
    exam = await make_exam(db, class_obj, subject, teacher, soon(3), "Quiz")
    past = await make_exam(db, class_obj, subject, teacher, soon(-10), "Unit test")
    await make_grade(db, past, sam, 88)
    await make_timetable(db, class_obj, subject, teacher)
    for day, status in [(1, "PRESENT"), (2, "PRESENT"), (3, "ABSENT")]:
        await make_attendance(db, sam, class_obj, date(2026, 10, day), AttendanceStatus(status))
    return {
        "admin_user": admin_user, "teacher_user": teacher_user, "parent_user": parent_user,
        "sam_user": sam_user, "ben_user": ben_user, "exam": exam,
    }


async def test_admin_dashboard(client, school):
    res = await client.get("/api/dashboard", headers=auth_headers(school["admin_user"]))

    assert res.status_code == 200
    body = res.json()
    assert body["summary"] == {
        "totalStudents": 2, "totalTeachers": 1, "totalParents": 1, "totalClasses": 1, "totalSubjects": 1,
    }
    assert len(body["recentActivity"]["newUsers"]) == 5


async def test_teacher_dashboard(client, school):
    res = await client.get("/api/dashboard", headers=auth_headers(school["teacher_user"]))

    assert res.status_code == 200
    body = res.json()
    assert body["summary"] == {"totalClasses": 1, "totalStudents": 1, "upcomingExams": 1}
    assert body["myClasses"][0]["_count"] == {"students": 1}
    assert [e["name"] for e in body["upcomingExams"]] == ["Quiz"]
    assert len(body["recentAttendance"]) == 3
    assert body["timetable"][0]["class"]["name"] == "5A"


async def test_student_dashboard_with_class(client, school):
    res = await client.get("/api/dashboard", headers=auth_headers(school["sam_user"]))

    assert res.status_code == 200
    body = res.json()
    assert body["summary"] == {
        "attendancePercentage": 67, "totalSubjects": 1, "upcomingExams": 1, "hasClass": True,
    }
    assert body["recentGrades"][0]["marks"] == 88
    assert body["studentInfo"]["class"]["teacher"]["user"]["fullName"] == "Tina"


async def test_student_dashboard_without_class(client, school):
    res = await client.get("/api/dashboard", headers=auth_headers(school["ben_user"]))

    assert res.status_code == 200
    body = res.json()
    assert body["summary"]["hasClass"] is False
    assert body["summary"]["attendancePercentage"] == 0
    assert body["subjects"] == []
    assert body["upcomingExams"] == []
    assert body["timetable"] == []


async def test_parent_dashboard(client, school):
    res = await client.get("/api/dashboard", headers=auth_headers(school["parent_user"]))

    assert res.status_code == 200
    body = res.json()
    assert body["summary"] == {"totalChildren": 2, "totalUpcomingExams": 1}
    percentages = {c["user"]["fullName"]: c["attendancePercentage"] for c in body["children"]}
    assert percentages == {"Sam": 67, "Ben": 0}
    assert body["upcomingExams"][0]["class"]["name"] == "5A"
    assert body["recentGrades"][0]["student"]["user"]["fullName"] == "Sam"


async def test_teacher_without_profile_is_forbidden(client, db):
    user, _ = await make_user(db, Role.TEACHER, "ghost@school.test", with_profile=False)

    res = await client.get("/api/dashboard", headers=auth_headers(user))

    assert res.status_code == 403
    assert res.json() == {"message": "Access denied. Teacher profile not found."}


class BrokenReader:
    def __getattr__(self, name):
        async def read(*args, **kwargs):
            raise RuntimeError("database exploded")
        return read


async def test_dashboard_failure_is_redacted_in_production(client, school, monkeypatch):
    from schoolhub.services.dashboard_service import DashboardService

    app.dependency_overrides[get_dashboard_service] = lambda: DashboardService(BrokenReader())
    headers = auth_headers(school["admin_user"])

    res = await client.get("/api/dashboard", headers=headers)
    assert res.status_code == 500
    assert res.json()["message"] == "Server error in admin_view: database exploded"

    monkeypatch.setattr(settings, "environment", "production")
    res = await client.get("/api/dashboard", headers=headers)
    assert res.status_code == 500
    assert res.json() == {"message": "Internal server error"}
