"""Unit tests for registration and login."""

import pytest

from campusvote.core.errors import AuthenticationError, NotFoundError, ValidationError
from campusvote.core.security import verify_password
from campusvote.services import accounts as accounts_service
from campusvote.services.accounts import RegistrationRequest


def _request(**overrides) -> RegistrationRequest:
    data = {
        "name": "Carol Student",
        "email": "carol@mallareddyuniversity.ac.in",
        "password": "secret1",
        "student_id": "ENG100",
        "department": "Engineering",
        "terms_accepted": True,
    }
    data.update(overrides)
    return RegistrationRequest(**data)


@pytest.mark.asyncio
async def test_register_user(store):
    user = await accounts_service.register_user(store, _request())

    assert user.student_id == "ENG100"
    assert user.is_admin is False
    assert user.has_voted is False
    assert user.voted_candidate_ids == set()
    assert user.password_hash != "secret1"
    assert verify_password("secret1", user.password_hash)

    stored = await store.get_user("ENG100")
    assert stored == user


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "overrides,field",
    [
        ({"name": ""}, "name"),
        ({"email": "carol@gmail.com"}, "email"),
        ({"email": "carol smith@mallareddyuniversity.ac.in"}, "email"),
        ({"password": "12345"}, "password"),
        ({"student_id": "  "}, "studentId"),
        ({"department": ""}, "department"),
        ({"terms_accepted": False}, "terms"),
    ],
)
async def test_register_rejects_invalid_fields(store, overrides, field):
    with pytest.raises(ValidationError) as exc_info:
        await accounts_service.register_user(store, _request(**overrides))

    assert field in exc_info.value.errors
    assert await store.get_user("ENG100") is None


@pytest.mark.asyncio
async def test_register_rejects_duplicate_student_id(store):
    await accounts_service.register_user(store, _request())

    with pytest.raises(ValidationError):
        await accounts_service.register_user(
            store, _request(email="other@mallareddyuniversity.ac.in")
        )


@pytest.mark.asyncio
async def test_register_rejects_duplicate_email(store):
    await accounts_service.register_user(store, _request())

    with pytest.raises(ValidationError):
        await accounts_service.register_user(
            store, _request(student_id="ENG101", email="CAROL@mallareddyuniversity.ac.in")
        )


@pytest.mark.asyncio
async def test_authenticate(store):
    await accounts_service.register_user(store, _request())

    user = await accounts_service.authenticate(store, "ENG100", "secret1")

    assert user.name == "Carol Student"


@pytest.mark.asyncio
async def test_authenticate_default_admin(store):
    admin = await accounts_service.authenticate(store, "ADMIN001", "admin123")
    assert admin.is_admin is True


@pytest.mark.asyncio
async def test_authenticate_wrong_password(store):
    await accounts_service.register_user(store, _request())

    with pytest.raises(AuthenticationError):
        await accounts_service.authenticate(store, "ENG100", "wrong-password")


@pytest.mark.asyncio
async def test_authenticate_unknown_student(store):
    with pytest.raises(AuthenticationError):
        await accounts_service.authenticate(store, "NOBODY", "secret1")


@pytest.mark.asyncio
async def test_authenticate_validates_input(store):
    with pytest.raises(ValidationError):
        await accounts_service.authenticate(store, "", "secret1")
    with pytest.raises(ValidationError):
        await accounts_service.authenticate(store, "ENG100", "123")


@pytest.mark.asyncio
async def test_get_user_not_found(store):
    with pytest.raises(NotFoundError):
        await accounts_service.get_user(store, "NOBODY")
