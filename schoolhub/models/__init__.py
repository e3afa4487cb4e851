"""Domain value objects and request payloads."""
from schoolhub.models.student import (
    Student,
    StudentCreate,
    StudentFilter,
    StudentStatus,
    StudentSummary,
    StudentUpdate,
)
from schoolhub.models.staff import Principal, Role, StaffAccount
from schoolhub.models.attendance import (
    AttendanceEntry,
    AttendanceRecord,
    AttendanceRow,
    AttendanceStatus,
    BulkAttendanceResult,
    MonthlyAttendance,
)
from schoolhub.models.mark import MarkCreate, MarkRecord, MarkRow, RankEntry
from schoolhub.models.report import (
    AttendanceReport,
    BulkStatusResult,
    ClassAttendance,
    ClassCount,
    DailyAttendance,
    Dashboard,
    EnrollmentStats,
    MarksReport,
    RecentApproval,
    StudentAverage,
    StudentReport,
)

__all__ = [
    "Student",
    "StudentCreate",
    "StudentFilter",
    "StudentStatus",
    "StudentSummary",
    "StudentUpdate",
    "Principal",
    "Role",
    "StaffAccount",
    "AttendanceEntry",
    "AttendanceRecord",
    "AttendanceRow",
    "AttendanceStatus",
    "BulkAttendanceResult",
    "MonthlyAttendance",
    "MarkCreate",
    "MarkRecord",
    "MarkRow",
    "RankEntry",
    "AttendanceReport",
    "BulkStatusResult",
    "ClassAttendance",
    "ClassCount",
    "DailyAttendance",
    "Dashboard",
    "EnrollmentStats",
    "MarksReport",
    "RecentApproval",
    "StudentAverage",
    "StudentReport",
]
