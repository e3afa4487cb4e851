"""Seed the default staff accounts if not present."""
from schoolhub.config import settings
from schoolhub.models.staff import Role
from schoolhub.services.accounts import AccountService
from schoolhub.store.base import RecordStore


async def seed_staff(store: RecordStore):
    accounts = AccountService(store)
    await accounts.ensure_staff(settings.seed_admin_username, settings.seed_admin_password, Role.ADMIN)
    await accounts.ensure_staff(
        settings.seed_teacher_username, settings.seed_teacher_password, Role.TEACHER
    )
