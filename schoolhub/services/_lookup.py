"""Shared store lookups used by several services."""
from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Iterable, Optional

from schoolhub.errors import DataIntegrityWarning, NotFoundError, ValidationError
from schoolhub.models.student import Student
from schoolhub.store.base import RecordStore

logger = logging.getLogger(__name__)


async def students_by_id(
    store: RecordStore, ids: Optional[Iterable[str]] = None
) -> dict[str, Student]:
    if ids is not None:
        ids = list(set(ids))
        if not ids:
            return {}
    return {s.id: s for s in await store.find_students(ids=ids)}


async def approved_student(store: RecordStore, student_id: str) -> Student:
    """The student records may be written against."""
    student = await store.get_student(student_id)
    if not student:
        raise NotFoundError("Student not found")
    if not student.is_approved:
        raise ValidationError("Student is not approved")
    return student


def as_day(value: date | datetime | str) -> date:
    """Calendar day of ``value``; the time of day is discarded."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.fromisoformat(str(value).strip().replace("Z", "+00:00")).date()
    except ValueError:
        raise ValidationError("Invalid date format (YYYY-MM-DD)")


def log_warnings(context: str, warnings: Iterable[DataIntegrityWarning]) -> None:
    for warning in warnings:
        logger.warning(
            "%s: %d %s record(s) reference missing students: %s",
            context,
            warning.count,
            warning.collection,
            ", ".join(warning.record_ids),
        )
