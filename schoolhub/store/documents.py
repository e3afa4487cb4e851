"""Beanie documents backing the Mongo record store."""
from datetime import date, datetime
from typing import Optional

import pymongo
from beanie import Document, Indexed
from pydantic import Field
from pymongo import IndexModel

from schoolhub.models.attendance import AttendanceRecord, AttendanceStatus
from schoolhub.models.mark import MarkRecord
from schoolhub.models.staff import Role, StaffAccount
from schoolhub.models.student import Student, StudentStatus

_INTERNAL = {"id", "revision_id"}


class StudentDocument(Document):
    name: str
    roll_number: Indexed(str, unique=True)
    email: Indexed(str, unique=True)
    class_name: Indexed(str)
    phone: Optional[str] = None
    address: Optional[str] = None
    password_hash: Optional[str] = None
    status: StudentStatus = StudentStatus.PENDING
    created_at: datetime = Field(default_factory=datetime.utcnow)
    approved_at: Optional[datetime] = None
    approved_by: Optional[str] = None

    class Settings:
        name = "students"
        use_state_management = True

    def to_model(self) -> Student:
        return Student(id=str(self.id), **self.model_dump(exclude=_INTERNAL))


class StaffDocument(Document):
    username: Indexed(str, unique=True)
    password_hash: str
    role: Role
    created_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "staff"

    def to_model(self) -> StaffAccount:
        return StaffAccount(id=str(self.id), **self.model_dump(exclude=_INTERNAL))


class AttendanceDocument(Document):
    """One row per student per day."""

    student_id: Indexed(str)
    date: Indexed(date)
    status: AttendanceStatus
    marked_by: str
    marked_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "attendance"
        use_state_management = True
        indexes = [
            IndexModel(
                [("student_id", pymongo.ASCENDING), ("date", pymongo.ASCENDING)],
                unique=True,
                name="student_date_unique",
            ),
        ]

    def to_model(self) -> AttendanceRecord:
        return AttendanceRecord(id=str(self.id), **self.model_dump(exclude=_INTERNAL))


class MarkDocument(Document):
    student_id: Indexed(str)
    exam_type: Indexed(str)
    subject: str
    score: float
    max_score: float = 100
    entered_by: str
    recorded_at: datetime = Field(default_factory=datetime.utcnow)

    class Settings:
        name = "marks"

    def to_model(self) -> MarkRecord:
        return MarkRecord(id=str(self.id), **self.model_dump(exclude=_INTERNAL))


DOCUMENT_MODELS = [StudentDocument, StaffDocument, AttendanceDocument, MarkDocument]
