from __future__ import annotations

from types import SimpleNamespace
from uuid import UUID, uuid4

import pytest

from app.core.enums import RoleEnum
from app.core.security import decode_token
from app.modules.identity.schemas import LoginRequest, UserCreate
from app.modules.identity.service import IdentityService
from app.shared.exceptions import ConflictException, ForbiddenException


class FakeIdentityRepository:
    def __init__(self) -> None:
        self.roles: dict[RoleEnum, SimpleNamespace] = {}
        self.users: dict[UUID, SimpleNamespace] = {}

    async def get_role_by_name(self, role_name: RoleEnum) -> SimpleNamespace | None:
        return self.roles.get(role_name)

    async def create_role(self, role_name: RoleEnum) -> SimpleNamespace:
        role = SimpleNamespace(id=uuid4(), name=role_name)
        self.roles[role_name] = role
        return role

    async def get_user_by_email(self, email: str) -> SimpleNamespace | None:
        return next((user for user in self.users.values() if user.email == email), None)

    async def get_user_by_id(self, user_id: UUID) -> SimpleNamespace | None:
        return self.users.get(user_id)

    async def create_user(
        self,
        email: str,
        password_hash: str,
        name: str,
        company: str | None,
        mobile: str | None,
        role_id: UUID,
    ) -> SimpleNamespace:
        role = next(role for role in self.roles.values() if role.id == role_id)
        user = SimpleNamespace(
            id=uuid4(),
            email=email,
            password_hash=password_hash,
            name=name,
            company=company,
            mobile=mobile,
            device_token=None,
            is_active=True,
            role_id=role_id,
            role=role,
        )
        self.users[user.id] = user
        return user

    async def set_device_token(self, user: SimpleNamespace, device_token: str | None) -> SimpleNamespace:
        user.device_token = device_token
        return user


async def make_service() -> tuple[IdentityService, FakeIdentityRepository]:
    repository = FakeIdentityRepository()
    service = IdentityService(repository)  # type: ignore[arg-type]
    await service.ensure_default_roles()
    return service, repository


def registration(**overrides: object) -> UserCreate:
    payload = {
        "email": "alice@pairslots.dev",
        "password": "StrongPass123!",
        "name": "Alice",
        "company": "Alice Ltd",
        "mobile": "+10000000001",
    }
    payload.update(overrides)
    return UserCreate.model_validate(payload)


@pytest.mark.asyncio
async def test_ensure_default_roles_creates_user_and_admin_once() -> None:
    service, repository = await make_service()
    await service.ensure_default_roles()

    assert set(repository.roles) == {RoleEnum.USER, RoleEnum.ADMIN}


@pytest.mark.asyncio
async def test_register_creates_regular_user_with_hashed_password() -> None:
    service, _ = await make_service()

    user = await service.register(registration())

    assert user.role.name == RoleEnum.USER
    assert user.password_hash != "StrongPass123!"
    assert (user.name, user.company, user.mobile) == ("Alice", "Alice Ltd", "+10000000001")


@pytest.mark.asyncio
async def test_register_ignores_requested_admin_role() -> None:
    service, _ = await make_service()

    payload = registration(role="admin")
    user = await service.register(payload)

    assert not hasattr(payload, "role")
    assert user.role.name == RoleEnum.USER


@pytest.mark.asyncio
async def test_register_duplicate_email_is_conflict() -> None:
    service, _ = await make_service()
    await service.register(registration())

    with pytest.raises(ConflictException):
        await service.register(registration(name="Other Alice"))


@pytest.mark.asyncio
async def test_login_issues_access_token_for_valid_credentials() -> None:
    service, _ = await make_service()
    user = await service.register(registration())

    token = await service.login(LoginRequest(email="alice@pairslots.dev", password="StrongPass123!"))

    claims = decode_token(token.access_token)
    assert claims["sub"] == str(user.id)
    assert claims["type"] == "access"
    assert claims["role"] == RoleEnum.USER
    assert await service.get_user_from_access_token(token.access_token) is user


@pytest.mark.asyncio
async def test_login_with_wrong_password_is_forbidden() -> None:
    service, _ = await make_service()
    await service.register(registration())

    with pytest.raises(ForbiddenException, match="Invalid credentials"):
        await service.login(LoginRequest(email="alice@pairslots.dev", password="WrongPass123!"))


@pytest.mark.asyncio
async def test_login_of_inactive_user_is_forbidden() -> None:
    service, _ = await make_service()
    user = await service.register(registration())
    user.is_active = False

    with pytest.raises(ForbiddenException, match="User is inactive"):
        await service.login(LoginRequest(email="alice@pairslots.dev", password="StrongPass123!"))


@pytest.mark.asyncio
async def test_update_device_token_stores_and_clears_token() -> None:
    service, _ = await make_service()
    user = await service.register(registration())

    await service.update_device_token(user, "device-abc")
    assert user.device_token == "device-abc"

    await service.update_device_token(user, None)
    assert user.device_token is None
