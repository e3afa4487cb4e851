"""Students, the enrollment status they move through, and the payloads that create them."""
from datetime import datetime
from enum import Enum
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, EmailStr, Field


class StudentStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class StudentSummary(BaseModel):
    """Display fields joined onto attendance and mark rows."""

    id: str
    name: str
    roll_number: str
    class_name: str


class Student(BaseModel):
    id: Optional[str] = None
    name: str
    roll_number: str
    email: str
    class_name: str
    phone: Optional[str] = None
    address: Optional[str] = None
    password_hash: Optional[str] = None
    status: StudentStatus = StudentStatus.PENDING
    created_at: datetime = Field(default_factory=datetime.utcnow)
    approved_at: Optional[datetime] = None
    approved_by: Optional[str] = None  # staff id

    @property
    def is_approved(self) -> bool:
        return self.status == StudentStatus.APPROVED

    def summary(self) -> StudentSummary:
        return StudentSummary(
            id=self.id,
            name=self.name,
            roll_number=self.roll_number,
            class_name=self.class_name,
        )

    def public(self) -> dict:
        """Serializable view without the credential hash."""
        out = self.model_dump(mode="json", exclude={"password_hash"})
        out["has_password"] = self.password_hash is not None
        return out


def _required_text(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("must not be empty")
    return value


RequiredText = Annotated[str, AfterValidator(_required_text)]


class StudentCreate(BaseModel):
    name: RequiredText
    roll_number: RequiredText
    email: EmailStr
    class_name: RequiredText
    phone: Optional[str] = None
    address: Optional[str] = None
    password: Optional[str] = None  # admin creation only


class StudentUpdate(BaseModel):
    """All fields optional for PUT; status and credential are not updatable here."""

    name: Optional[RequiredText] = None
    roll_number: Optional[RequiredText] = None
    email: Optional[EmailStr] = None
    class_name: Optional[RequiredText] = None
    phone: Optional[str] = None
    address: Optional[str] = None


class StudentFilter(BaseModel):
    search: Optional[str] = None  # name, roll number or email
    class_name: Optional[str] = None
    status: Optional[StudentStatus] = None
