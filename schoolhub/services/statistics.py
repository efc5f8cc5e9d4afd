# schoolhub/services/statistics.py
"""Derived attendance and grade statistics.

Pure functions over already-loaded rows. Every ratio checks its denominator
first and yields 0 for empty input. Rounding is half-up and applies only to the
final derived value.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, Tuple, Union

from ..models.attendance import AttendanceStatus

Number = Union[int, float]

STATUSES = [status.value for status in AttendanceStatus]


def round_half_up(value: Number, digits: int = 0) -> Number:
    """Round like the dashboards expect: 2.5 -> 3, 81.665 -> 81.67"""
    exponent = Decimal(1).scaleb(-digits)
    rounded = Decimal(repr(value)).quantize(exponent, rounding=ROUND_HALF_UP)
    return int(rounded) if digits == 0 else float(rounded)


def _status_of(record: Any) -> str:
    status = record.get("status") if isinstance(record, dict) else getattr(record, "status", record)
    return status.value if isinstance(status, AttendanceStatus) else str(status)


def _marks_of(grade: Any) -> int:
    if isinstance(grade, dict):
        return grade["marks"]
    return getattr(grade, "marks", grade)


def attendance_summary(records: Iterable[Any]) -> Dict[str, int]:
    """Count records per status; statuses with no records count 0"""
    summary = {status: 0 for status in STATUSES}
    total = 0
    for record in records:
        status = _status_of(record)
        if status in summary:
            summary[status] += 1
        total += 1
    summary["TOTAL"] = total
    return summary


def attendance_percentage(summary: Dict[str, int]) -> int:
    total = summary.get("TOTAL", 0)
    if total <= 0:
        return 0
    return round_half_up(summary.get(AttendanceStatus.PRESENT.value, 0) / total * 100)


def percentage_from_status_counts(rows: Iterable[Tuple[Any, int]]) -> int:
    """Attendance percentage from grouped (status, count) rows"""
    total = 0
    present = 0
    for status, count in rows:
        total += count
        if _status_of(status) == AttendanceStatus.PRESENT.value:
            present += count
    if total <= 0:
        return 0
    return round_half_up(present / total * 100)


def grade_average(grades: Iterable[Any]) -> float:
    marks = [_marks_of(grade) for grade in grades]
    if not marks:
        return 0
    return round_half_up(sum(marks) / len(marks), 2)


def exam_statistics(grades: Iterable[Any]) -> Dict[str, Number]:
    # Raw mean, unlike grade_average which rounds to 2dp
    marks: List[int] = [_marks_of(grade) for grade in grades]
    if not marks:
        return {"totalStudents": 0, "average": 0, "highest": 0, "lowest": 0}
    return {
        "totalStudents": len(marks),
        "average": sum(marks) / len(marks),
        "highest": max(marks),
        "lowest": min(marks),
    }
