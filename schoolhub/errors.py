"""Domain errors raised by the services and translated to HTTP by the app."""
from __future__ import annotations

from pydantic import BaseModel, Field


class SchoolHubError(Exception):
    """Base class; ``kind`` is stable and safe to show to API clients."""

    kind = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(SchoolHubError):
    """Malformed or out-of-range input, or a uniqueness violation."""

    kind = "validation_error"


class NotFoundError(SchoolHubError):
    kind = "not_found"


class AuthError(SchoolHubError):
    """Credential mismatch or an account that may not log in."""

    kind = "auth_error"


class ForbiddenError(SchoolHubError):
    """Caller is authenticated but not entitled to the resource."""

    kind = "forbidden"


class DataIntegrityWarning(BaseModel):
    """Records whose student reference no longer resolves."""

    collection: str
    record_ids: list[str] = Field(default_factory=list)
    message: str = "student reference does not resolve"

    @property
    def count(self) -> int:
        return len(self.record_ids)
