"""Daily attendance: one record per student per day, last write wins."""
from __future__ import annotations

import calendar
import logging
from datetime import MAXYEAR, MINYEAR, date, datetime
from typing import Any, Sequence

from schoolhub import queries
from schoolhub.errors import NotFoundError, ValidationError
from schoolhub.models.attendance import (
    AttendanceEntry,
    AttendanceRecord,
    AttendanceRow,
    AttendanceStatus,
    BulkAttendanceResult,
    MonthlyAttendance,
)
from schoolhub.services._lookup import approved_student, as_day, log_warnings, students_by_id
from schoolhub.services._validation import parse
from schoolhub.store.base import RecordStore

logger = logging.getLogger(__name__)


def _status(value: AttendanceStatus | str) -> AttendanceStatus:
    try:
        return AttendanceStatus(value)
    except ValueError:
        raise ValidationError(f"Invalid attendance status: {value}")


class AttendanceService:
    def __init__(self, store: RecordStore):
        self._store = store

    async def mark(
        self,
        student_id: str,
        day: date | datetime | str,
        status: AttendanceStatus | str,
        recorder_id: str,
    ) -> AttendanceRecord:
        day = as_day(day)
        status = _status(status)
        await approved_student(self._store, student_id)
        return await self._store.upsert_attendance(student_id, day, status, recorder_id)

    async def mark_bulk(
        self,
        entries: Sequence[AttendanceEntry | dict[str, Any]],
        day: date | datetime | str,
        recorder_id: str,
    ) -> BulkAttendanceResult:
        """Mark every entry for ``day``. Entries that fail are reported, the rest still apply."""
        if not isinstance(entries, (list, tuple)) or not entries:
            raise ValidationError("Attendances array is required")
        day = as_day(day)
        parsed = [parse(AttendanceEntry, e) for e in entries]

        saved = 0
        failed: list[str] = []
        for entry in parsed:
            try:
                await self.mark(entry.student_id, day, entry.status, recorder_id)
            except (NotFoundError, ValidationError) as e:
                logger.warning("Attendance for %s on %s not saved: %s", entry.student_id, day, e)
                failed.append(entry.student_id)
                continue
            saved += 1
        logger.info("%d attendance records saved for %s", saved, day)
        return BulkAttendanceResult(saved=saved, failed=failed)

    async def get_by_date(self, day: date | datetime | str) -> list[AttendanceRow]:
        day = as_day(day)
        records = await self._store.find_attendance(start=day, end=day)
        students = await students_by_id(self._store, (r.student_id for r in records))
        log_warnings(f"attendance for {day}", queries.find_orphans("attendance", records, students))
        return [
            AttendanceRow(**r.model_dump(), student=students[r.student_id].summary())
            for r in records
            if r.student_id in students
        ]

    async def get_by_student(self, student_id: str) -> list[AttendanceRecord]:
        return list(await self._store.find_attendance(student_id=student_id))

    async def monthly_report(self, student_id: str, month: int, year: int) -> MonthlyAttendance:
        try:
            month, year = int(month), int(year)
        except (TypeError, ValueError):
            raise ValidationError("Month and year must be numbers") from None
        if not 1 <= month <= 12:
            raise ValidationError("Month must be between 1 and 12")
        if not MINYEAR <= year <= MAXYEAR:
            raise ValidationError(f"Year must be between {MINYEAR} and {MAXYEAR}")
        last_day = calendar.monthrange(year, month)[1]
        records = await self._store.find_attendance(
            student_id=student_id, start=date(year, month, 1), end=date(year, month, last_day)
        )
        present, total, pct = queries.attendance_summary(records)
        return MonthlyAttendance(
            student_id=student_id,
            month=month,
            year=year,
            present=present,
            absent=total - present,
            total=total,
            percentage=pct,
        )
