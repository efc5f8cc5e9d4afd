# schoolhub/utils/formatting.py
"""Shape ORM rows into the camelCase JSON the frontend consumes."""
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, Optional


def iso(value: Optional[Any]) -> Optional[str]:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def uid(value: Optional[Any]) -> Optional[str]:
    return str(value) if value is not None else None


def enum_value(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def user_brief(user) -> Optional[Dict[str, Any]]:
    if user is None:
        return None
    return {"fullName": user.full_name, "email": user.email}


def user_to_dict(user) -> Dict[str, Any]:
    return {
        "id": uid(user.id),
        "email": user.email,
        "fullName": user.full_name,
        "avatar": user.avatar,
        "role": enum_value(user.role),
        "createdAt": iso(user.created_at),
        "updatedAt": iso(user.updated_at),
    }


def class_brief(class_obj) -> Optional[Dict[str, Any]]:
    if class_obj is None:
        return None
    return {"id": uid(class_obj.id), "name": class_obj.name, "level": class_obj.level}


def subject_brief(subject) -> Optional[Dict[str, Any]]:
    if subject is None:
        return None
    return {"id": uid(subject.id), "name": subject.name, "code": subject.code}


def student_brief(student) -> Optional[Dict[str, Any]]:
    if student is None:
        return None
    return {
        "id": uid(student.id),
        "classId": uid(student.class_id),
        "parentId": uid(student.parent_id),
        "user": user_brief(student.user),
    }


def attendance_to_dict(attendance, include_student: bool = True, include_class: bool = True) -> Dict[str, Any]:
    data = {
        "id": uid(attendance.id),
        "studentId": uid(attendance.student_id),
        "classId": uid(attendance.class_id),
        "date": iso(attendance.date),
        "status": enum_value(attendance.status),
        "createdAt": iso(attendance.created_at),
    }
    if include_student:
        data["student"] = student_brief(attendance.student)
    if include_class:
        data["class"] = class_brief(attendance.class_ref)
    return data


def exam_to_dict(exam, include_class: bool = True, include_subject: bool = True) -> Dict[str, Any]:
    data = {
        "id": uid(exam.id),
        "name": exam.name,
        "date": iso(exam.date),
        "classId": uid(exam.class_id),
        "subjectId": uid(exam.subject_id),
        "teacherId": uid(exam.teacher_id),
    }
    if include_class:
        data["class"] = class_brief(exam.class_ref)
    if include_subject:
        data["subject"] = subject_brief(exam.subject)
    return data


def grade_to_dict(grade, include_student: bool = True, include_exam: bool = True) -> Dict[str, Any]:
    data = {
        "id": uid(grade.id),
        "examId": uid(grade.exam_id),
        "studentId": uid(grade.student_id),
        "subjectId": uid(grade.subject_id),
        "marks": grade.marks,
        "subject": subject_brief(grade.subject),
    }
    if include_student:
        data["student"] = student_brief(grade.student)
    if include_exam:
        data["exam"] = {"id": uid(grade.exam.id), "name": grade.exam.name, "date": iso(grade.exam.date)}
    return data


def enrollment_to_dict(enrollment) -> Dict[str, Any]:
    return {
        "id": uid(enrollment.id),
        "studentId": uid(enrollment.student_id),
        "classId": uid(enrollment.class_id),
        "createdAt": iso(enrollment.created_at),
        "student": student_brief(enrollment.student),
        "class": class_brief(enrollment.class_ref),
    }


def notification_to_dict(notification) -> Dict[str, Any]:
    return {
        "id": uid(notification.id),
        "userId": uid(notification.user_id),
        "title": notification.title,
        "message": notification.message,
        "type": enum_value(notification.type),
        "read": notification.read,
        "createdAt": iso(notification.created_at),
    }
