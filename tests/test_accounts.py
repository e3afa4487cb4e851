import pytest

from schoolhub.config import settings
from schoolhub.errors import AuthError
from schoolhub.models.staff import Role
from schoolhub.seed import seed_staff


async def test_seed_staff_is_idempotent(store, accounts):
    await seed_staff(store)
    await seed_staff(store)

    assert sorted(a.role.value for a in store.staff.values()) == ["admin", "teacher"]
    account = await accounts.authenticate_staff(
        settings.seed_admin_username, settings.seed_admin_password
    )
    assert account.role == Role.ADMIN


async def test_staff_login_failures(store, accounts):
    await accounts.ensure_staff("teacher", "pw", Role.TEACHER)

    with pytest.raises(AuthError):
        await accounts.authenticate_staff("teacher", "wrong")
    with pytest.raises(AuthError):
        await accounts.authenticate_staff("nobody", "pw")


async def test_resolve_checks_role_and_approval(store, accounts, enrollment, make_student):
    staff = await accounts.ensure_staff("teacher", "pw", Role.TEACHER)
    student = await make_student(1)

    assert (await accounts.resolve(staff.id, Role.TEACHER)).role == Role.TEACHER
    assert (await accounts.resolve(student.id, Role.STUDENT)).name == student.name
    with pytest.raises(AuthError):
        await accounts.resolve(staff.id, Role.ADMIN)

    await enrollment.reject(student.id, "admin")
    with pytest.raises(AuthError):
        await accounts.resolve(student.id, Role.STUDENT)
