"""Named aggregations over record lists.

Each function takes plain value objects already read from the store and
returns derived values; none of them touch the store. Records whose student
reference does not resolve are left out of the result and reported through
:func:`find_orphans` by the caller.
"""
from __future__ import annotations

from collections import defaultdict
from datetime import date, timedelta
from typing import Iterable, Mapping, Sequence

from schoolhub.errors import DataIntegrityWarning
from schoolhub.models.attendance import AttendanceRecord, AttendanceStatus
from schoolhub.models.mark import MarkRecord, RankEntry
from schoolhub.models.report import (
    ClassAttendance,
    ClassCount,
    DailyAttendance,
    RecentApproval,
    StudentAverage,
)
from schoolhub.models.student import Student, StudentStatus

GRADE_THRESHOLDS: list[tuple[float, str]] = [
    (90, "A+"),
    (80, "A"),
    (70, "B"),
    (60, "C"),
    (50, "D"),
]


def percentage(part: int | float, whole: int | float) -> float:
    """``part / whole * 100`` rounded to 2 places; 0 when ``whole`` is 0."""
    if not whole:
        return 0
    return round(part / whole * 100, 2)


def letter_grade(average: float) -> str:
    for threshold, grade in GRADE_THRESHOLDS:
        if average >= threshold:
            return grade
    return "F"


def attendance_summary(records: Iterable[AttendanceRecord]) -> tuple[int, int, float]:
    """Returns ``(present, total, percentage)``."""
    present = total = 0
    for record in records:
        total += 1
        if record.status == AttendanceStatus.PRESENT:
            present += 1
    return present, total, percentage(present, total)


def find_orphans(
    collection: str,
    records: Iterable[AttendanceRecord | MarkRecord],
    students: Mapping[str, Student],
) -> list[DataIntegrityWarning]:
    missing = [r.id for r in records if r.student_id not in students]
    if not missing:
        return []
    return [DataIntegrityWarning(collection=collection, record_ids=missing)]


def student_averages(
    marks: Iterable[MarkRecord], students: Mapping[str, Student]
) -> list[StudentAverage]:
    """Mean score per student across all their marks, in first-seen order."""
    totals: dict[str, list[float]] = {}
    for mark in marks:
        if mark.student_id not in students:
            continue
        entry = totals.setdefault(mark.student_id, [0.0, 0])
        entry[0] += mark.score
        entry[1] += 1
    return [
        StudentAverage(student=students[sid].summary(), average=total / count)
        for sid, (total, count) in totals.items()
    ]


def pass_rate(averages: Sequence[StudentAverage], pass_mark: float = 50) -> float:
    passed = sum(1 for a in averages if a.average >= pass_mark)
    return percentage(passed, len(averages))


def top_performers(averages: Sequence[StudentAverage], limit: int = 5) -> list[StudentAverage]:
    # sorted() is stable, so equal averages keep aggregation order
    ranked = sorted(averages, key=lambda a: a.average, reverse=True)[:limit]
    return [StudentAverage(student=a.student, average=round(a.average, 2)) for a in ranked]


def rank_exam(marks: Iterable[MarkRecord], students: Mapping[str, Student]) -> list[RankEntry]:
    """Total and average per student for one exam, best average first.

    Equal averages are ordered by student id.
    """
    totals: dict[str, list[float]] = defaultdict(lambda: [0.0, 0])
    for mark in marks:
        if mark.student_id not in students:
            continue
        totals[mark.student_id][0] += mark.score
        totals[mark.student_id][1] += 1

    entries = []
    for sid, (total, count) in totals.items():
        average = total / count
        entries.append(
            RankEntry(
                student=students[sid].summary(),
                total=total,
                subject_count=int(count),
                average=round(average, 2),
                grade=letter_grade(average),
            )
        )
    entries.sort(key=lambda e: e.student.id)
    entries.sort(key=lambda e: e.average, reverse=True)
    return entries


def daily_attendance_series(
    records: Iterable[AttendanceRecord], end: date, days: int = 7
) -> list[DailyAttendance]:
    """Present/total per day for the ``days`` days ending on ``end``; empty days included."""
    start = end - timedelta(days=days - 1)
    counts = {start + timedelta(days=i): [0, 0] for i in range(days)}
    for record in records:
        bucket = counts.get(record.date)
        if bucket is None:
            continue
        bucket[1] += 1
        if record.status == AttendanceStatus.PRESENT:
            bucket[0] += 1
    return [DailyAttendance(date=d, present=p, total=t) for d, (p, t) in counts.items()]


def class_attendance(
    records: Iterable[AttendanceRecord], students: Mapping[str, Student]
) -> list[ClassAttendance]:
    """Present/total per class, counting only currently approved students."""
    counts: dict[str, list[int]] = defaultdict(lambda: [0, 0])
    for record in records:
        student = students.get(record.student_id)
        if student is None or student.status != StudentStatus.APPROVED:
            continue
        counts[student.class_name][1] += 1
        if record.status == AttendanceStatus.PRESENT:
            counts[student.class_name][0] += 1
    return [
        ClassAttendance(class_name=name, present=p, total=t)
        for name, (p, t) in sorted(counts.items())
    ]


def class_distribution(students: Iterable[Student]) -> list[ClassCount]:
    counts: dict[str, int] = defaultdict(int)
    for student in students:
        counts[student.class_name] += 1
    return [ClassCount(class_name=name, count=n) for name, n in sorted(counts.items())]


def recent_approvals(students: Iterable[Student], limit: int = 5) -> list[RecentApproval]:
    approved = [s for s in students if s.status == StudentStatus.APPROVED and s.approved_at]
    approved.sort(key=lambda s: s.approved_at, reverse=True)
    return [RecentApproval(student=s.summary(), approved_at=s.approved_at) for s in approved[:limit]]
