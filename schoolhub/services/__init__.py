"""Domain services. Each takes a RecordStore and holds no other state."""
from schoolhub.services.accounts import AccountService
from schoolhub.services.attendance import AttendanceService
from schoolhub.services.enrollment import AuthOutcome, EnrollmentService
from schoolhub.services.grading import GradingService
from schoolhub.services.reporting import ReportingService

__all__ = [
    "AccountService",
    "AttendanceService",
    "AuthOutcome",
    "EnrollmentService",
    "GradingService",
    "ReportingService",
]
