from __future__ import annotations

import os

os.environ.setdefault("JWT_SECRET_KEY", "test-secret-key")
os.environ.setdefault("SEED_ADMIN_PASSWORD", "admin-test-pw")
os.environ.setdefault("SEED_TEACHER_PASSWORD", "teacher-test-pw")

import itertools
from datetime import date, datetime
from typing import Iterable, Optional, Sequence

import pytest

from schoolhub.errors import NotFoundError, ValidationError
from schoolhub.models.attendance import AttendanceRecord, AttendanceStatus
from schoolhub.models.mark import MarkRecord
from schoolhub.models.staff import Principal, Role, StaffAccount
from schoolhub.models.student import Student, StudentStatus
from schoolhub.services import (
    AccountService,
    AttendanceService,
    EnrollmentService,
    GradingService,
    ReportingService,
)


class FakeRecordStore:
    """In-memory RecordStore with the same key and reference rules as the Mongo one."""

    def __init__(self):
        self._ids = itertools.count(1)
        self.students: dict[str, Student] = {}
        self.staff: dict[str, StaffAccount] = {}
        self.attendance: dict[str, AttendanceRecord] = {}
        self.marks: dict[str, MarkRecord] = {}
        self._order: dict[str, int] = {}

    def _next_id(self) -> str:
        n = next(self._ids)
        return f"{n:024d}"

    def _check_unique(self, student: Student) -> None:
        for other in self.students.values():
            if other.id == student.id:
                continue
            if other.roll_number == student.roll_number:
                raise ValidationError("Roll Number already exists")
            if other.email == student.email:
                raise ValidationError("Email already exists")

    # Students

    async def insert_student(self, student: Student) -> Student:
        self._check_unique(student)
        stored = student.model_copy(update={"id": self._next_id()}, deep=True)
        self.students[stored.id] = stored
        self._order[stored.id] = len(self._order)
        return stored.model_copy(deep=True)

    async def get_student(self, student_id: str) -> Optional[Student]:
        s = self.students.get(student_id)
        return s.model_copy(deep=True) if s else None

    async def find_student_by_roll(self, roll_number: str) -> Optional[Student]:
        for s in self.students.values():
            if s.roll_number == roll_number:
                return s.model_copy(deep=True)
        return None

    async def find_students(
        self,
        *,
        statuses: Optional[Iterable[StudentStatus]] = None,
        class_name: Optional[str] = None,
        search: Optional[str] = None,
        ids: Optional[Iterable[str]] = None,
    ) -> Sequence[Student]:
        statuses = set(statuses) if statuses is not None else None
        ids = set(ids) if ids is not None else None
        needle = search.strip().lower() if search and search.strip() else None
        out = []
        for s in self.students.values():
            if statuses is not None and s.status not in statuses:
                continue
            if class_name and s.class_name != class_name:
                continue
            if ids is not None and s.id not in ids:
                continue
            if needle and not any(needle in v.lower() for v in (s.name, s.roll_number, s.email)):
                continue
            out.append(s.model_copy(deep=True))
        out.sort(key=lambda s: (s.created_at, self._order[s.id]), reverse=True)
        return out

    async def save_student(self, student: Student) -> Student:
        if student.id not in self.students:
            raise NotFoundError("Student not found")
        self._check_unique(student)
        self.students[student.id] = student.model_copy(deep=True)
        return student.model_copy(deep=True)

    async def set_students_status(
        self, student_ids: Sequence[str], changes: dict
    ) -> tuple[list[str], int]:
        matched, modified = [], 0
        for sid in dict.fromkeys(student_ids):
            if sid in self.students:
                current = self.students[sid]
                if any(getattr(current, k) != v for k, v in changes.items()):
                    self.students[sid] = current.model_copy(update=changes)
                    modified += 1
                matched.append(sid)
        return matched, modified

    async def delete_student(self, student_id: str) -> bool:
        return self.students.pop(student_id, None) is not None

    # Staff

    async def insert_staff(self, account: StaffAccount) -> StaffAccount:
        if any(a.username == account.username for a in self.staff.values()):
            raise ValidationError("Username already exists")
        stored = account.model_copy(update={"id": self._next_id()})
        self.staff[stored.id] = stored
        return stored

    async def get_staff(self, staff_id: str) -> Optional[StaffAccount]:
        return self.staff.get(staff_id)

    async def find_staff_by_username(self, username: str) -> Optional[StaffAccount]:
        return next((a for a in self.staff.values() if a.username == username), None)

    # Attendance

    async def upsert_attendance(
        self, student_id: str, day: date, status: AttendanceStatus, marked_by: str
    ) -> AttendanceRecord:
        if student_id not in self.students:
            raise NotFoundError("Student not found")
        for rid, record in self.attendance.items():
            if record.student_id == student_id and record.date == day:
                updated = record.model_copy(
                    update={"status": status, "marked_by": marked_by, "marked_at": datetime.utcnow()}
                )
                self.attendance[rid] = updated
                return updated
        record = AttendanceRecord(
            id=self._next_id(), student_id=student_id, date=day, status=status, marked_by=marked_by
        )
        self.attendance[record.id] = record
        return record

    async def find_attendance(
        self,
        *,
        student_id: Optional[str] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> Sequence[AttendanceRecord]:
        out = [
            r
            for r in self.attendance.values()
            if (not student_id or r.student_id == student_id)
            and (not start or r.date >= start)
            and (not end or r.date <= end)
        ]
        out.sort(key=lambda r: r.date, reverse=True)
        return out[:limit] if limit else out

    # Marks

    async def insert_mark(self, mark: MarkRecord) -> MarkRecord:
        if mark.student_id not in self.students:
            raise NotFoundError("Student not found")
        stored = mark.model_copy(update={"id": self._next_id()})
        self.marks[stored.id] = stored
        return stored

    async def find_marks(
        self, *, student_id: Optional[str] = None, exam_type: Optional[str] = None
    ) -> Sequence[MarkRecord]:
        out = [
            m
            for m in self.marks.values()
            if (not student_id or m.student_id == student_id)
            and (not exam_type or m.exam_type == exam_type)
        ]
        # ids grow with insertion, so they break recorded_at ties newest-first
        out.sort(key=lambda m: (m.recorded_at, m.id), reverse=True)
        return out


@pytest.fixture
def store():
    return FakeRecordStore()


@pytest.fixture
def enrollment(store):
    return EnrollmentService(store)


@pytest.fixture
def attendance(store):
    return AttendanceService(store)


@pytest.fixture
def grading(store):
    return GradingService(store)


@pytest.fixture
def reporting(store):
    return ReportingService(store)


@pytest.fixture
def accounts(store):
    return AccountService(store)


@pytest.fixture
def admin():
    return Principal(id="admin-1", role=Role.ADMIN, name="admin")


@pytest.fixture
def teacher():
    return Principal(id="teacher-1", role=Role.TEACHER, name="teacher")


def student_payload(n: int, class_name: str = "10A", **extra) -> dict:
    return {
        "name": f"Student {n}",
        "roll_number": f"R{n:03d}",
        "email": f"student{n}@school.example.com",
        "class_name": class_name,
        **extra,
    }


@pytest.fixture
def make_student(enrollment, admin):
    """Enroll a student and, by default, approve them."""

    async def _make(n: int, class_name: str = "10A", approve: bool = True) -> Student:
        student = await enrollment.enroll(student_payload(n, class_name))
        if approve:
            student = await enrollment.approve(student.id, admin.id)
        return student

    return _make
