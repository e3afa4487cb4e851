"""Aggregate, read-only views. None of these are persisted."""
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field

from schoolhub.errors import DataIntegrityWarning
from schoolhub.models.attendance import AttendanceRecord, AttendanceRow
from schoolhub.models.mark import MarkRecord, MarkRow
from schoolhub.models.student import StudentSummary


class BulkStatusResult(BaseModel):
    modified_count: int
    skipped: list[str] = Field(default_factory=list)  # ids that matched no student


class ClassCount(BaseModel):
    class_name: str
    count: int


class EnrollmentStats(BaseModel):
    total: int
    approved: int
    pending: int
    rejected: int
    class_distribution: list[ClassCount] = Field(default_factory=list)


class DailyAttendance(BaseModel):
    date: date
    present: int
    total: int


class ClassAttendance(BaseModel):
    class_name: str
    present: int
    total: int


class StudentAverage(BaseModel):
    student: StudentSummary
    average: float


class RecentApproval(BaseModel):
    student: StudentSummary
    approved_at: Optional[datetime] = None


class Dashboard(BaseModel):
    total_students: int
    pending_students: int
    present_today: int
    total_today: int
    pass_percentage: float
    top_performers: list[StudentAverage] = Field(default_factory=list)
    weekly_attendance: list[DailyAttendance] = Field(default_factory=list)
    class_attendance: list[ClassAttendance] = Field(default_factory=list)
    recent_students: list[RecentApproval] = Field(default_factory=list)
    warnings: list[DataIntegrityWarning] = Field(default_factory=list)


class StudentReport(BaseModel):
    student: dict  # Student.public()
    attendance: list[AttendanceRecord] = Field(default_factory=list)
    marks: list[MarkRecord] = Field(default_factory=list)
    attendance_percentage: float = 0
    average_marks: float = 0
    total_marks: int = 0  # number of mark records


class AttendanceReport(BaseModel):
    rows: list[AttendanceRow] = Field(default_factory=list)
    warnings: list[DataIntegrityWarning] = Field(default_factory=list)


class MarksReport(BaseModel):
    rows: list[MarkRow] = Field(default_factory=list)
    warnings: list[DataIntegrityWarning] = Field(default_factory=list)
