# tests/test_statistics.py
from types import SimpleNamespace

import pytest

from schoolhub.models import AttendanceStatus
from schoolhub.services.statistics import (
    attendance_percentage,
    attendance_summary,
    exam_statistics,
    grade_average,
    percentage_from_status_counts,
    round_half_up,
)


def records(*statuses):
    return [SimpleNamespace(status=AttendanceStatus(s)) for s in statuses]


def test_attendance_summary_counts_every_status():
    summary = attendance_summary(records("PRESENT", "PRESENT", "ABSENT", "LATE"))

    assert summary == {"PRESENT": 2, "ABSENT": 1, "LATE": 1, "EXCUSED": 0, "TOTAL": 4}
    assert attendance_percentage(summary) == 50


def test_attendance_summary_accepts_plain_dicts():
    summary = attendance_summary([{"status": "EXCUSED"}, {"status": "PRESENT"}])

    assert summary["EXCUSED"] == 1
    assert summary["TOTAL"] == 2


def test_percentage_is_zero_without_records():
    summary = attendance_summary([])

    assert summary["TOTAL"] == 0
    assert attendance_percentage(summary) == 0
    assert percentage_from_status_counts([]) == 0


@pytest.mark.parametrize("present,total,expected", [
    (2, 3, 67),
    (1, 8, 13),  # 12.5 rounds up
    (1, 3, 33),
    (4, 4, 100),
])
def test_percentage_rounds_half_up(present, total, expected):
    summary = attendance_summary(records(*(["PRESENT"] * present + ["ABSENT"] * (total - present))))

    assert attendance_percentage(summary) == expected


def test_percentage_from_grouped_counts():
    rows = [(AttendanceStatus.PRESENT, 3), ("ABSENT", 1)]

    assert percentage_from_status_counts(rows) == 75


def test_round_half_up_differs_from_bankers_rounding():
    assert round_half_up(2.5) == 3
    assert round_half_up(0.5) == 1
    assert round_half_up(2.675, 2) == 2.68


def test_grade_average_rounds_to_two_places():
    grades = [SimpleNamespace(marks=m) for m in (80, 90, 75)]

    assert grade_average(grades) == 81.67
    assert grade_average([81, 82]) == 81.5
    assert grade_average([]) == 0


def test_exam_statistics_keeps_raw_mean():
    stats = exam_statistics([{"marks": 70}, {"marks": 85}, {"marks": 90}])

    assert stats["totalStudents"] == 3
    assert stats["average"] == pytest.approx(81.6666666, rel=1e-6)
    assert stats["highest"] == 90
    assert stats["lowest"] == 70


def test_exam_statistics_without_grades():
    assert exam_statistics([]) == {"totalStudents": 0, "average": 0, "highest": 0, "lowest": 0}
