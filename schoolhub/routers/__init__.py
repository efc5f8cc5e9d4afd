from . import (
    health, auth, dashboard, attendance, grades, enrollments, notifications, classes, exams
)

__all__ = [
    "health",
    "auth",
    "dashboard",
    "attendance",
    "grades",
    "enrollments",
    "notifications",
    "classes",
    "exams",
]
