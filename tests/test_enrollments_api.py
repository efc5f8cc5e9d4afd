# tests/test_enrollments_api.py
import pytest
from sqlalchemy import select

from schoolhub.models import Enrollment, Notification, Role, Student
from tests.factories import auth_headers, make_class, make_user

pytestmark = pytest.mark.anyio


@pytest.fixture
async def school(anyio_backend, db):
    admin_user, _ = await make_user(db, Role.ADMIN, "admin@school.test", "Ada")
    teacher_user, teacher = await make_user(db, Role.TEACHER, "tina@school.test", "Tina")
    parent_user, parent = await make_user(db, Role.PARENT, "pat@school.test", "Pat")
    student_user, student = await make_user(db, Role.STUDENT, "sam@school.test", "Sam", parent_id=parent.id)
    class_obj = await make_class(db, "5A", teacher)
    return {
        "admin_user": admin_user, "teacher_user": teacher_user, "parent_user": parent_user,
        "student_user": student_user, "student": student, "class": class_obj,
    }


async def _student_class_id(db, student_id):
    result = await db.execute(
        select(Student.class_id).where(Student.id == student_id).execution_options(populate_existing=True)
    )
    return result.scalar_one()


async def test_enrollment_sets_student_class(client, db, school):
    res = await client.post("/api/enrollments", headers=auth_headers(school["admin_user"]), json={
        "studentId": str(school["student"].id), "classId": str(school["class"].id),
    })

    assert res.status_code == 201
    body = res.json()
    assert body["enrollment"]["class"]["name"] == "5A"
    assert await _student_class_id(db, school["student"].id) == school["class"].id

    titles = {n.title for n in (await db.execute(select(Notification))).scalars().all()}
    assert {"Assigned to Class", "New Student Enrollment"} <= titles


async def test_duplicate_enrollment_is_rejected(client, school):
    headers = auth_headers(school["admin_user"])
    payload = {"studentId": str(school["student"].id), "classId": str(school["class"].id)}

    await client.post("/api/enrollments", headers=headers, json=payload)
    res = await client.post("/api/enrollments", headers=headers, json=payload)

    assert res.status_code == 400
    assert res.json() == {"message": "Student is already enrolled in this class"}


async def test_teacher_cannot_create_enrollment_directly(client, school):
    res = await client.post("/api/enrollments", headers=auth_headers(school["teacher_user"]), json={})

    assert res.status_code == 403


async def test_assign_by_email_notifies_parent(client, db, school):
    res = await client.post("/api/enrollments/assign", headers=auth_headers(school["teacher_user"]), json={
        "studentEmail": " sam@school.test ", "classId": str(school["class"].id),
    })

    assert res.status_code == 201
    assert res.json()["message"] == "Student assigned to class successfully"

    result = await db.execute(select(Notification).where(Notification.user_id == school["parent_user"].id))
    assert [n.title for n in result.scalars().all()] == ["Child Assigned to Class"]


async def test_assign_unknown_student(client, school):
    res = await client.post("/api/enrollments/assign", headers=auth_headers(school["teacher_user"]), json={
        "studentEmail": "ghost@school.test", "classId": str(school["class"].id),
    })

    assert res.status_code == 400
    assert res.json() == {"message": "Student not found with the provided email"}


async def test_delete_enrollment_clears_class(client, db, school):
    headers = auth_headers(school["admin_user"])
    res = await client.post("/api/enrollments", headers=headers, json={
        "studentId": str(school["student"].id), "classId": str(school["class"].id),
    })
    enrollment_id = res.json()["enrollment"]["id"]

    res = await client.delete(f"/api/enrollments/{enrollment_id}", headers=headers)

    assert res.status_code == 200
    assert await _student_class_id(db, school["student"].id) is None
    assert (await db.execute(select(Enrollment))).scalars().all() == []


async def test_list_enrollments_filtered_by_class(client, school):
    headers = auth_headers(school["admin_user"])
    await client.post("/api/enrollments", headers=headers, json={
        "studentId": str(school["student"].id), "classId": str(school["class"].id),
    })

    res = await client.get("/api/enrollments", params={"classId": str(school["class"].id)}, headers=headers)

    assert res.status_code == 200
    assert [e["student"]["user"]["fullName"] for e in res.json()["enrollments"]] == ["Sam"]
