"""The Record Store interface every service talks to."""
from __future__ import annotations

from datetime import date
from typing import Iterable, Optional, Protocol, Sequence

from schoolhub.models.attendance import AttendanceRecord, AttendanceStatus
from schoolhub.models.mark import MarkRecord
from schoolhub.models.staff import StaffAccount
from schoolhub.models.student import Student, StudentStatus


class RecordStore(Protocol):
    """Async persistence for students, staff, attendance and marks.

    Implementations enforce the unique keys (student roll number and email,
    staff username) and raise ``ValidationError`` on violation. Attendance and
    mark writes check that the referenced student exists and raise
    ``NotFoundError`` otherwise. Reads always hit the backing store.
    """

    # Students
    async def insert_student(self, student: Student) -> Student: ...

    async def get_student(self, student_id: str) -> Optional[Student]: ...

    async def find_student_by_roll(self, roll_number: str) -> Optional[Student]: ...

    async def find_students(
        self,
        *,
        statuses: Optional[Iterable[StudentStatus]] = None,
        class_name: Optional[str] = None,
        search: Optional[str] = None,
        ids: Optional[Iterable[str]] = None,
    ) -> Sequence[Student]:
        """Matching students, newest first."""
        ...

    async def save_student(self, student: Student) -> Student: ...

    async def set_students_status(
        self, student_ids: Sequence[str], changes: dict
    ) -> tuple[list[str], int]:
        """Apply ``changes`` to every listed student.

        Returns the ids that matched and how many students actually changed.
        """
        ...

    async def delete_student(self, student_id: str) -> bool: ...

    # Staff
    async def insert_staff(self, account: StaffAccount) -> StaffAccount: ...

    async def get_staff(self, staff_id: str) -> Optional[StaffAccount]: ...

    async def find_staff_by_username(self, username: str) -> Optional[StaffAccount]: ...

    # Attendance
    async def upsert_attendance(
        self, student_id: str, day: date, status: AttendanceStatus, marked_by: str
    ) -> AttendanceRecord: ...

    async def find_attendance(
        self,
        *,
        student_id: Optional[str] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        """Records within ``[start, end]``, most recent date first."""
        ...

    # Marks
    async def insert_mark(self, mark: MarkRecord) -> MarkRecord: ...

    async def find_marks(
        self,
        *,
        student_id: Optional[str] = None,
        exam_type: Optional[str] = None,
    ) -> Sequence[MarkRecord]:
        """Matching marks, most recently recorded first."""
        ...
