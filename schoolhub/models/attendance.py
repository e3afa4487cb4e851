from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from schoolhub.models.student import StudentSummary


class AttendanceStatus(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"


class AttendanceRecord(BaseModel):
    """One student's presence on one calendar day; unique per (student_id, date)."""

    id: Optional[str] = None
    student_id: str
    date: date
    status: AttendanceStatus
    marked_by: str  # staff id
    marked_at: datetime = Field(default_factory=datetime.utcnow)


class AttendanceEntry(BaseModel):
    student_id: str
    status: AttendanceStatus


class AttendanceRow(AttendanceRecord):
    student: StudentSummary


class BulkAttendanceResult(BaseModel):
    saved: int
    failed: list[str] = Field(default_factory=list)


class MonthlyAttendance(BaseModel):
    student_id: str
    month: int
    year: int
    present: int
    absent: int
    total: int
    percentage: float
