"""Capability registry and the single authorization gate."""
from __future__ import annotations

from typing import Literal

from schoolhub.errors import ForbiddenError
from schoolhub.models.staff import Principal, Role

Capability = Literal[
    "approve_enrollment",
    "manage_students",
    "view_all_students",
    "view_pending",
    "view_students",
    "mark_attendance",
    "view_attendance",
    "record_marks",
    "view_marks",
    "view_reports",
    "view_dashboard",
    "view_student_report",
]

_STAFF: frozenset[str] = frozenset(
    {
        "view_students",
        "mark_attendance",
        "view_attendance",
        "record_marks",
        "view_marks",
        "view_reports",
        "view_dashboard",
        "view_student_report",
    }
)

ROLE_CAPABILITIES: dict[Role, frozenset[str]] = {
    Role.ADMIN: _STAFF
    | {"approve_enrollment", "manage_students", "view_all_students", "view_pending"},
    Role.TEACHER: _STAFF,
    Role.STUDENT: frozenset({"view_dashboard", "view_student_report"}),
}


def has_capability(principal: Principal | None, capability: Capability) -> bool:
    if principal is None:
        return False
    return capability in ROLE_CAPABILITIES.get(principal.role, frozenset())


def authorize(principal: Principal | None, capability: Capability) -> None:
    if not has_capability(principal, capability):
        raise ForbiddenError(f"Missing {capability} permission")
