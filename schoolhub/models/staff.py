from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class Role(str, Enum):
    """Caller roles. Staff accounts are admins or teachers; students log in separately."""

    ADMIN = "admin"
    TEACHER = "teacher"
    STUDENT = "student"


class StaffAccount(BaseModel):
    id: Optional[str] = None
    username: str
    password_hash: str
    role: Role
    created_at: datetime = Field(default_factory=datetime.utcnow)


class Principal(BaseModel):
    """The authenticated caller an operation runs on behalf of."""

    id: str
    role: Role
    name: str

    @property
    def is_student(self) -> bool:
        return self.role == Role.STUDENT
