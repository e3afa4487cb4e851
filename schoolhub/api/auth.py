"""JWT-based stateless authentication for staff and students."""
from typing import Optional

from fastapi import APIRouter
from pydantic import BaseModel

from schoolhub.api.deps import Accounts, CurrentPrincipal, Enrollment, Store
from schoolhub.errors import AuthError
from schoolhub.models.staff import Role
from schoolhub.security import create_access_token, create_refresh_token, decode_token

router = APIRouter()


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    user: dict = {}


class LoginRequest(BaseModel):
    username: str
    password: str


class StudentLoginRequest(BaseModel):
    roll_number: str
    password: str


class SetupPasswordRequest(BaseModel):
    roll_number: str
    temporary_password: str
    new_password: str


class NeedsSetupResponse(BaseModel):
    needs_setup: bool = True
    student_id: str
    roll_number: str
    message: str = "Please set your password"


class RefreshRequest(BaseModel):
    refresh_token: str


def _tokens(subject: str, role: Role, user: Optional[dict] = None) -> TokenResponse:
    return TokenResponse(
        access_token=create_access_token(subject, role.value),
        refresh_token=create_refresh_token(subject, role.value),
        user=user or {},
    )


def _student_user(student) -> dict:
    return {
        "id": student.id,
        "name": student.name,
        "roll_number": student.roll_number,
        "role": Role.STUDENT.value,
    }


@router.post("/login", response_model=TokenResponse)
async def login(req: LoginRequest, accounts: Accounts):
    account = await accounts.authenticate_staff(req.username, req.password)
    return _tokens(
        account.id,
        account.role,
        {"id": account.id, "username": account.username, "role": account.role.value},
    )


@router.post("/student-login", response_model=TokenResponse | NeedsSetupResponse)
async def student_login(req: StudentLoginRequest, enrollment: Enrollment):
    outcome = await enrollment.authenticate(req.roll_number, req.password)
    if outcome.needs_setup:
        return NeedsSetupResponse(student_id=outcome.student.id, roll_number=outcome.student.roll_number)
    return _tokens(outcome.student.id, Role.STUDENT, _student_user(outcome.student))


@router.post("/student/setup-password", response_model=TokenResponse)
async def setup_password(req: SetupPasswordRequest, enrollment: Enrollment):
    student = await enrollment.setup_credential(req.roll_number, req.temporary_password, req.new_password)
    return _tokens(student.id, Role.STUDENT, _student_user(student))


@router.post("/refresh", response_model=TokenResponse)
async def refresh_token(req: RefreshRequest, accounts: Accounts):
    payload = decode_token(req.refresh_token, expected_type="refresh")
    try:
        role = Role(payload["role"])
    except ValueError:
        raise AuthError("Invalid refresh token")
    principal = await accounts.resolve(payload["sub"], role)
    return _tokens(principal.id, principal.role)


@router.get("/me")
async def me(principal: CurrentPrincipal, store: Store):
    if principal.is_student:
        student = await store.get_student(principal.id)
        return {**student.public(), "role": Role.STUDENT.value}
    return {"id": principal.id, "username": principal.name, "role": principal.role.value}
