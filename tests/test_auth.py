"""
Tests for login, session resolution and logout.
"""

import json
from pathlib import Path

import pytest
from httpx import AsyncClient, ASGITransport

from booking_ledger.core.exceptions import InvalidCredentials, PersistenceError, Unauthenticated
from booking_ledger.core.security import hash_password
from booking_ledger.main import app
from booking_ledger.models.user import Role, User
from booking_ledger.services.auth_service import AuthGate
from booking_ledger.services.identity_store import IdentityStore
from booking_ledger.services.interfaces.memory_session_store import InMemorySessionStore
from booking_ledger.services.registry import build_registry


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


@pytest.mark.asyncio
async def test_login_success(client: AsyncClient):
    """Valid credentials return a session token and the caller's identity."""
    response = await client.post("/api/v1/auth/login", json={
        "email": "test@example.com",
        "password": "Password123",
    })
    assert response.status_code == 200
    data = response.json()
    assert data["access_token"]
    assert data["token_type"] == "bearer"
    assert data["expires_in"] > 0
    assert data["user"]["email"] == "test@example.com"
    assert data["user"]["role"] == "user"
    assert "passwordHash" not in data["user"]


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient):
    """Wrong password returns 401."""
    response = await client.post("/api/v1/auth/login", json={
        "email": "test@example.com",
        "password": "wrongpassword",
    })
    assert response.status_code == 401
    assert response.json()["error"] == "invalid_credentials"


@pytest.mark.asyncio
async def test_login_nonexistent_email(client: AsyncClient):
    """Non-existent email returns 401."""
    response = await client.post("/api/v1/auth/login", json={
        "email": "nobody@example.com",
        "password": "anypassword123",
    })
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_login_missing_password(client: AsyncClient):
    response = await client.post("/api/v1/auth/login", json={"email": "test@example.com"})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_me_returns_identity(client: AsyncClient, auth_headers):
    response = await client.get("/api/v1/auth/me", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["id"] == "1"


@pytest.mark.asyncio
async def test_me_without_token(client: AsyncClient):
    """Missing token returns 401 with a Bearer challenge."""
    response = await client.get("/api/v1/auth/me")
    assert response.status_code == 401
    assert response.headers["WWW-Authenticate"] == "Bearer"


@pytest.mark.asyncio
async def test_user_id_is_not_a_token(client: AsyncClient):
    """The old mock servers accepted the user id as a token; that must fail."""
    response = await client.get("/api/v1/auth/me", headers={"Authorization": "Bearer 1"})
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_logout_revokes_session(client: AsyncClient, auth_headers):
    response = await client.post("/api/v1/auth/logout", headers=auth_headers)
    assert response.status_code == 204

    response = await client.get("/api/v1/auth/me", headers=auth_headers)
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_gate_rejects_wrong_password(services):
    with pytest.raises(InvalidCredentials):
        await services.auth.login("admin@example.com", "Password123")


@pytest.mark.asyncio
async def test_gate_resolves_role(services):
    token, user = await services.auth.login("admin@example.com", "Admin123")
    identity = await services.auth.resolve(token)
    assert identity.user_id == user.id
    assert identity.is_admin


@pytest.mark.asyncio
@pytest.mark.parametrize("token", [None, "", "short", "x" * 200, "has spaces in it and is long enough to pass"])
async def test_gate_rejects_malformed_tokens(services, token):
    with pytest.raises(Unauthenticated):
        await services.auth.resolve(token)


@pytest.mark.asyncio
async def test_gate_rejects_unknown_token(services):
    with pytest.raises(Unauthenticated):
        await services.auth.resolve("A" * 43)


@pytest.mark.asyncio
async def test_session_expires(services):
    """Tokens stop resolving once the TTL has passed."""
    clock = FakeClock()
    gate = AuthGate(services.identities, InMemorySessionStore(clock=clock), ttl_seconds=60)

    token, _ = await gate.login("test@example.com", "Password123")
    assert (await gate.resolve(token)).email == "test@example.com"

    clock.now += 61
    with pytest.raises(Unauthenticated):
        await gate.resolve(token)


@pytest.mark.asyncio
async def test_cleartext_password_never_verifies(services):
    """A user record holding a cleartext password cannot log in with it."""
    identities = IdentityStore([
        User.model_validate({"id": "9", "email": "legacy@example.com", "password": "Password123"}),
    ])
    gate = AuthGate(identities, InMemorySessionStore(), ttl_seconds=60)

    with pytest.raises(InvalidCredentials):
        await gate.login("legacy@example.com", "Password123")


@pytest.mark.asyncio
async def test_legacy_bcrypt_password_field(services):
    """Records written by the old register route keep the hash under `password`."""
    identities = IdentityStore([
        User.model_validate({"id": "9", "email": "legacy@example.com", "password": hash_password("Secret123")}),
    ])
    gate = AuthGate(identities, InMemorySessionStore(), ttl_seconds=60)

    token, user = await gate.login("legacy@example.com", "Secret123")
    assert user.id == "9"
    assert (await gate.resolve(token)).user_id == "9"


async def registry_with_users(settings, users):
    """Service registry over a data file holding only the given users."""
    path = Path(settings.DATA_FILE)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps({"users": users}), encoding="utf-8")
    return await build_registry(settings, sessions=InMemorySessionStore())


@pytest.mark.asyncio
async def test_login_matches_stored_email_exactly(settings):
    """An email is matched exactly as stored, including the case of its domain."""
    services = await registry_with_users(settings, [
        {"id": "7", "email": "Mixed@Example.COM", "passwordHash": hash_password("pw123456"), "role": "user"},
    ])
    app.state.services = services
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            response = await ac.post("/api/v1/auth/login", json={
                "email": "Mixed@Example.COM",
                "password": "pw123456",
            })
            assert response.status_code == 200
            assert response.json()["user"]["email"] == "Mixed@Example.COM"

            response = await ac.post("/api/v1/auth/login", json={
                "email": "mixed@example.com",
                "password": "pw123456",
            })
            assert response.status_code == 401
    finally:
        del app.state.services


@pytest.mark.asyncio
async def test_manager_role_loads(settings):
    """Users with the manager role load and log in, without admin rights."""
    services = await registry_with_users(settings, [
        {"id": "5", "email": "manager@example.com", "passwordHash": hash_password("Manager123"), "role": "manager"},
    ])

    token, user = await services.auth.login("manager@example.com", "Manager123")
    assert user.role == Role.MANAGER

    identity = await services.auth.resolve(token)
    assert identity.role == Role.MANAGER
    assert not identity.is_admin


@pytest.mark.asyncio
async def test_unknown_role_fails_load(settings):
    with pytest.raises(PersistenceError):
        await registry_with_users(settings, [
            {"id": "5", "email": "root@example.com", "passwordHash": hash_password("Root1234"), "role": "superuser"},
        ])
