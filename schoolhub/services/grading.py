"""Exam marks and the rank/grade statistics derived from them."""
from __future__ import annotations

import logging
from typing import Any

from schoolhub import queries
from schoolhub.errors import ValidationError
from schoolhub.models.mark import MarkCreate, MarkRecord, MarkRow, RankEntry
from schoolhub.services._lookup import approved_student, log_warnings, students_by_id
from schoolhub.services._validation import parse
from schoolhub.store.base import RecordStore

logger = logging.getLogger(__name__)


class GradingService:
    def __init__(self, store: RecordStore):
        self._store = store

    async def add_mark(self, data: MarkCreate | dict[str, Any], recorder_id: str) -> MarkRecord:
        payload = parse(MarkCreate, data)
        if not payload.exam_type.strip() or not payload.subject.strip():
            raise ValidationError("Exam type and subject are required")
        if payload.max_score <= 0:
            raise ValidationError("Maximum score must be positive")
        if not 0 <= payload.score <= payload.max_score:
            raise ValidationError(f"Score must be between 0 and {payload.max_score:g}")
        await approved_student(self._store, payload.student_id)
        mark = await self._store.insert_mark(
            MarkRecord(
                student_id=payload.student_id,
                exam_type=payload.exam_type.strip(),
                subject=payload.subject.strip(),
                score=payload.score,
                max_score=payload.max_score,
                entered_by=recorder_id,
            )
        )
        logger.info("Mark recorded for %s: %s/%s", mark.student_id, mark.exam_type, mark.subject)
        return mark

    async def by_student(self, student_id: str) -> list[MarkRecord]:
        return list(await self._store.find_marks(student_id=student_id))

    async def _rows(self, marks: list[MarkRecord], context: str) -> list[MarkRow]:
        students = await students_by_id(self._store, (m.student_id for m in marks))
        log_warnings(context, queries.find_orphans("marks", marks, students))
        return [
            MarkRow(**m.model_dump(), student=students[m.student_id].summary())
            for m in marks
            if m.student_id in students
        ]

    async def all_marks(self) -> list[MarkRow]:
        return await self._rows(list(await self._store.find_marks()), "all marks")

    async def by_exam(self, exam_type: str) -> list[MarkRow]:
        """Marks for one exam, highest score first."""
        marks = sorted(
            await self._store.find_marks(exam_type=exam_type), key=lambda m: m.score, reverse=True
        )
        return await self._rows(marks, f"exam {exam_type}")

    async def rank(self, exam_type: str) -> list[RankEntry]:
        marks = list(await self._store.find_marks(exam_type=exam_type))
        students = await students_by_id(self._store, (m.student_id for m in marks))
        log_warnings(f"rank {exam_type}", queries.find_orphans("marks", marks, students))
        return queries.rank_exam(marks, students)
