"""Shared dependencies: record store, services, JWT auth and capability checks."""
from typing import Annotated, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from schoolhub.errors import AuthError
from schoolhub.models.staff import Principal, Role
from schoolhub.rbac import Capability, authorize
from schoolhub.security import decode_token
from schoolhub.services import (
    AccountService,
    AttendanceService,
    EnrollmentService,
    GradingService,
    ReportingService,
)
from schoolhub.store.base import RecordStore
from schoolhub.store.mongo import MongoRecordStore

security = HTTPBearer(auto_error=False)

_store = MongoRecordStore()


def get_store() -> RecordStore:
    return _store


Store = Annotated[RecordStore, Depends(get_store)]


def get_accounts(store: Store) -> AccountService:
    return AccountService(store)


def get_enrollment(store: Store) -> EnrollmentService:
    return EnrollmentService(store)


def get_attendance(store: Store) -> AttendanceService:
    return AttendanceService(store)


def get_grading(store: Store) -> GradingService:
    return GradingService(store)


def get_reporting(store: Store) -> ReportingService:
    return ReportingService(store)


async def get_current_principal(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)],
    accounts: Annotated[AccountService, Depends(get_accounts)],
) -> Principal:
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    payload = decode_token(credentials.credentials)
    try:
        role = Role(payload["role"])
    except ValueError:
        raise AuthError("Invalid token")
    return await accounts.resolve(payload["sub"], role)


def require_capability(capability: Capability):
    async def checker(principal: Annotated[Principal, Depends(get_current_principal)]):
        authorize(principal, capability)
        return principal

    return checker


# Type aliases for route injection
CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]
Accounts = Annotated[AccountService, Depends(get_accounts)]
Enrollment = Annotated[EnrollmentService, Depends(get_enrollment)]
Attendance = Annotated[AttendanceService, Depends(get_attendance)]
Grading = Annotated[GradingService, Depends(get_grading)]
Reporting = Annotated[ReportingService, Depends(get_reporting)]
Approver = Annotated[Principal, Depends(require_capability("approve_enrollment"))]
StudentManager = Annotated[Principal, Depends(require_capability("manage_students"))]
AttendanceMarker = Annotated[Principal, Depends(require_capability("mark_attendance"))]
AttendanceViewer = Annotated[Principal, Depends(require_capability("view_attendance"))]
MarkRecorder = Annotated[Principal, Depends(require_capability("record_marks"))]
MarkViewer = Annotated[Principal, Depends(require_capability("view_marks"))]
ReportViewer = Annotated[Principal, Depends(require_capability("view_reports"))]
