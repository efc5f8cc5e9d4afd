# tests/test_grades_api.py
import pytest

from schoolhub.models import Role
from tests.factories import (
    auth_headers, make_class, make_exam, make_grade, make_subject, make_user, utc
)

pytestmark = pytest.mark.anyio


@pytest.fixture
async def school(anyio_backend, db):
    teacher_user, teacher = await make_user(db, Role.TEACHER, "tina@school.test", "Tina")
    class_obj = await make_class(db, "5A", teacher)
    subject = await make_subject(db, class_obj)
    midterm = await make_exam(db, class_obj, subject, teacher, utc(2026, 9, 1), "Midterm")
    final = await make_exam(db, class_obj, subject, teacher, utc(2026, 10, 1), "Final")
    sam_user, sam = await make_user(db, Role.STUDENT, "sam@school.test", "Sam", class_id=class_obj.id)
    ann_user, ann = await make_user(db, Role.STUDENT, "ann@school.test", "Ann", class_id=class_obj.id)
    return {
        "teacher_user": teacher_user, "teacher": teacher, "class": class_obj, "subject": subject,
        "midterm": midterm, "final": final,
        "sam_user": sam_user, "sam": sam, "ann_user": ann_user, "ann": ann,
    }


async def test_student_grades_with_rounded_average(client, db, school):
    await make_grade(db, school["midterm"], school["sam"], 80)
    await make_grade(db, school["final"], school["sam"], 75)
    await make_grade(db, school["midterm"], school["ann"], 90)

    res = await client.get(f"/api/grades/student/{school['sam'].id}", headers=auth_headers(school["sam_user"]))

    assert res.status_code == 200
    body = res.json()
    assert body["average"] == 77.5
    assert body["total"] == 2
    assert [g["exam"]["name"] for g in body["grades"]] == ["Final", "Midterm"]


async def test_exam_statistics_over_grades(client, db, school):
    for student, marks in [(school["sam"], 70), (school["ann"], 85)]:
        await make_grade(db, school["midterm"], student, marks)

    res = await client.get(f"/api/grades/exam/{school['midterm'].id}", headers=auth_headers(school["teacher_user"]))

    assert res.status_code == 200
    body = res.json()
    assert body["statistics"] == {"totalStudents": 2, "average": 77.5, "highest": 85, "lowest": 70}
    assert [g["student"]["user"]["fullName"] for g in body["grades"]] == ["Ann", "Sam"]


async def test_exam_without_grades_has_zero_statistics(client, school):
    res = await client.get(f"/api/grades/exam/{school['final'].id}", headers=auth_headers(school["teacher_user"]))

    assert res.json()["statistics"] == {"totalStudents": 0, "average": 0, "highest": 0, "lowest": 0}


async def test_create_update_delete_grade(client, school):
    headers = auth_headers(school["teacher_user"])
    payload = {
        "examId": str(school["midterm"].id),
        "studentId": str(school["sam"].id),
        "subjectId": str(school["subject"].id),
        "marks": 88,
    }

    res = await client.post("/api/grades", headers=headers, json=payload)
    assert res.status_code == 201
    grade_id = res.json()["grade"]["id"]

    res = await client.post("/api/grades", headers=headers, json=payload)
    assert res.status_code == 400
    assert res.json() == {"message": "Grade already exists for this student in this exam"}

    res = await client.put(f"/api/grades/{grade_id}", headers=headers, json={"marks": 91})
    assert res.status_code == 200
    assert res.json()["grade"]["marks"] == 91

    res = await client.delete(f"/api/grades/{grade_id}", headers=headers)
    assert res.status_code == 200

    res = await client.delete(f"/api/grades/{grade_id}", headers=headers)
    assert res.status_code == 404
    assert res.json() == {"message": "Grade not found"}


async def test_student_sees_only_own_grade(client, db, school):
    grade = await make_grade(db, school["midterm"], school["sam"], 64)

    res = await client.get(f"/api/grades/{grade.id}", headers=auth_headers(school["sam_user"]))
    assert res.status_code == 200
    assert res.json()["grade"]["marks"] == 64

    res = await client.get(f"/api/grades/{grade.id}", headers=auth_headers(school["ann_user"]))
    assert res.status_code == 403


async def test_invalid_grade_id_is_bad_request(client, school):
    res = await client.get("/api/grades/not-a-uuid", headers=auth_headers(school["sam_user"]))

    assert res.status_code == 400


async def test_teacher_reads_grade_only_for_own_exam(client, db, school):
    grade = await make_grade(db, school["midterm"], school["sam"], 64)
    outsider_user, outsider = await make_user(db, Role.TEACHER, "otto@school.test", "Otto")
    other_class = await make_class(db, "6B", outsider)
    other_subject = await make_subject(db, other_class, "Physics", "PHY")
    await make_exam(db, other_class, other_subject, outsider, utc(2026, 9, 15), "Quiz")

    res = await client.get(f"/api/grades/{grade.id}", headers=auth_headers(school["teacher_user"]))
    assert res.status_code == 200
    assert res.json()["grade"]["marks"] == 64

    res = await client.get(f"/api/grades/{grade.id}", headers=auth_headers(outsider_user))
    assert res.status_code == 403
    assert res.json() == {"message": "Access denied. You do not own this resource."}
