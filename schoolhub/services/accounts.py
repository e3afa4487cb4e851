"""Staff login and resolving token subjects back to principals."""
import logging

from schoolhub.errors import AuthError
from schoolhub.models.staff import Principal, Role, StaffAccount
from schoolhub.security import get_password_hash, verify_password
from schoolhub.store.base import RecordStore

logger = logging.getLogger(__name__)


class AccountService:
    def __init__(self, store: RecordStore):
        self._store = store

    async def authenticate_staff(self, username: str, password: str) -> StaffAccount:
        account = await self._store.find_staff_by_username(username)
        if not account or not verify_password(password, account.password_hash):
            raise AuthError("Invalid credentials")
        return account

    async def resolve(self, subject: str, role: Role) -> Principal:
        """Load the caller named by a token; raises AuthError if it is gone or no longer eligible."""
        if role == Role.STUDENT:
            student = await self._store.get_student(subject)
            if not student or not student.is_approved:
                raise AuthError("User not found or inactive")
            return Principal(id=student.id, role=Role.STUDENT, name=student.name)
        account = await self._store.get_staff(subject)
        if not account or account.role != role:
            raise AuthError("User not found or inactive")
        return Principal(id=account.id, role=account.role, name=account.username)

    async def ensure_staff(self, username: str, password: str, role: Role) -> StaffAccount:
        """Provision a staff account if the username is free. Existing accounts are left alone."""
        existing = await self._store.find_staff_by_username(username)
        if existing:
            return existing
        account = await self._store.insert_staff(
            StaffAccount(username=username, password_hash=get_password_hash(password), role=role)
        )
        logger.info("Provisioned %s account %s", role.value, username)
        return account
