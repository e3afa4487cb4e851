"""Dashboards and per-student / per-class reports, computed fresh on every call."""
from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional

from schoolhub import queries
from schoolhub.config import settings
from schoolhub.errors import ForbiddenError, NotFoundError
from schoolhub.models.attendance import AttendanceRow
from schoolhub.models.mark import MarkRow
from schoolhub.models.report import AttendanceReport, Dashboard, MarksReport, StudentReport
from schoolhub.models.staff import Principal
from schoolhub.models.student import Student, StudentStatus
from schoolhub.rbac import authorize, has_capability
from schoolhub.services._lookup import as_day, log_warnings, students_by_id
from schoolhub.store.base import RecordStore

DayLike = date | datetime | str


class ReportingService:
    def __init__(self, store: RecordStore):
        self._store = store

    async def dashboard(self, principal: Principal, today: Optional[date] = None) -> Dashboard:
        authorize(principal, "view_dashboard")
        today = today or date.today()
        elevated = has_capability(principal, "view_pending")

        all_students = await self._store.find_students()
        students = {s.id: s for s in all_students}

        trend_start = today - timedelta(days=settings.dashboard_trend_days - 1)
        recent_attendance = await self._store.find_attendance(start=trend_start, end=today)
        today_attendance = [r for r in recent_attendance if r.date == today]
        present_today, total_today, _ = queries.attendance_summary(today_attendance)

        marks = await self._store.find_marks()
        averages = queries.student_averages(marks, students)

        warnings = queries.find_orphans("attendance", recent_attendance, students)
        warnings += queries.find_orphans("marks", marks, students)
        log_warnings("dashboard", warnings)

        return Dashboard(
            total_students=sum(1 for s in all_students if s.is_approved),
            pending_students=(
                sum(1 for s in all_students if s.status == StudentStatus.PENDING) if elevated else 0
            ),
            present_today=present_today,
            total_today=total_today,
            pass_percentage=queries.pass_rate(averages, settings.pass_mark),
            top_performers=queries.top_performers(averages, settings.dashboard_top_limit),
            weekly_attendance=queries.daily_attendance_series(
                recent_attendance, today, settings.dashboard_trend_days
            ),
            class_attendance=queries.class_attendance(today_attendance, students),
            recent_students=(
                queries.recent_approvals(all_students, settings.dashboard_top_limit) if elevated else []
            ),
            warnings=warnings,
        )

    async def _report_for(
        self,
        student: Student,
        start: Optional[date] = None,
        end: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> StudentReport:
        attendance = list(
            await self._store.find_attendance(student_id=student.id, start=start, end=end, limit=limit)
        )
        marks = list(await self._store.find_marks(student_id=student.id))
        _, _, attendance_pct = queries.attendance_summary(attendance)
        average = round(sum(m.score for m in marks) / len(marks), 2) if marks else 0
        return StudentReport(
            student=student.public(),
            attendance=attendance,
            marks=marks,
            attendance_percentage=attendance_pct,
            average_marks=average,
            total_marks=len(marks),
        )

    async def student_report(self, student_id: str, principal: Principal) -> StudentReport:
        authorize(principal, "view_student_report")
        if principal.is_student and principal.id != student_id:
            raise ForbiddenError("Access denied")
        student = await self._store.get_student(student_id)
        if not student:
            raise NotFoundError("Student not found")
        return await self._report_for(student, limit=settings.report_recent_attendance_limit)

    async def class_report(
        self,
        class_name: str,
        start: Optional[DayLike] = None,
        end: Optional[DayLike] = None,
    ) -> list[StudentReport]:
        """One report per approved student in the class, attendance limited to the range."""
        start = as_day(start) if start else None
        end = as_day(end) if end else None
        students = await self._store.find_students(
            statuses=[StudentStatus.APPROVED], class_name=class_name
        )
        return [await self._report_for(s, start=start, end=end) for s in students]

    async def attendance_report(
        self,
        class_name: Optional[str] = None,
        start: Optional[DayLike] = None,
        end: Optional[DayLike] = None,
    ) -> AttendanceReport:
        start = as_day(start) if start else None
        end = as_day(end) if end else None
        records = await self._store.find_attendance(start=start, end=end)
        students = await students_by_id(self._store, (r.student_id for r in records))
        warnings = queries.find_orphans("attendance", records, students)
        log_warnings("attendance report", warnings)
        rows = [
            AttendanceRow(**r.model_dump(), student=students[r.student_id].summary())
            for r in records
            if r.student_id in students
            and (not class_name or students[r.student_id].class_name == class_name)
        ]
        return AttendanceReport(rows=rows, warnings=warnings)

    async def marks_report(
        self, exam_type: Optional[str] = None, class_name: Optional[str] = None
    ) -> MarksReport:
        marks = await self._store.find_marks(exam_type=exam_type)
        students = await students_by_id(self._store, (m.student_id for m in marks))
        warnings = queries.find_orphans("marks", marks, students)
        log_warnings("marks report", warnings)
        rows = [
            MarkRow(**m.model_dump(), student=students[m.student_id].summary())
            for m in marks
            if m.student_id in students
            and (not class_name or students[m.student_id].class_name == class_name)
        ]
        return MarksReport(rows=rows, warnings=warnings)
