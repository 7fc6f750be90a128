"""
Pytest fixtures for services, HTTP client, and authentication.

Every test gets its own data file under tmp_path, seeded with the demo
users and trips, so tests never share state.
"""

import os

# Must be set before any settings are read
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("ENVIRONMENT", "test")

from datetime import date, timedelta
from pathlib import Path
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from booking_ledger.main import app
from booking_ledger.core.config import Settings
from booking_ledger.services.auth_service import Identity
from booking_ledger.services.interfaces.memory_session_store import InMemorySessionStore
from booking_ledger.services.registry import ServiceRegistry, build_registry

TEST_PASSWORD = "Password123"
ADMIN_PASSWORD = "Admin123"


def make_settings(tmp_path: Path, **overrides) -> Settings:
    values = {
        "DATA_FILE": str(tmp_path / "data" / "db.json"),
        "BACKUP_DIR": str(tmp_path / "backups"),
        "SESSION_BACKEND": "memory",
        "AUTO_CONFIRM_BOOKINGS": True,
        "PERSISTENCE_TIMEOUT_SECONDS": 5.0,
    }
    values.update(overrides)
    return Settings(**values)


def booking_payload(**overrides) -> dict:
    """A valid one-way booking 30 days out."""
    payload = {
        "tripId": "trip1",
        "fullName": "Test User",
        "email": "test@example.com",
        "travelers": 2,
        "startDate": (date.today() + timedelta(days=30)).isoformat(),
        "tripType": "one-way",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return make_settings(tmp_path)


@pytest_asyncio.fixture
async def services(settings: Settings) -> ServiceRegistry:
    """Fresh service graph over a seeded data file."""
    return await build_registry(settings, sessions=InMemorySessionStore())


@pytest_asyncio.fixture
async def client(services: ServiceRegistry) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the test service registry."""
    app.state.services = services

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    del app.state.services


@pytest.fixture
def test_user(services: ServiceRegistry):
    return services.identities.find_by_email("test@example.com")


@pytest.fixture
def test_identity(test_user) -> Identity:
    return Identity.of(test_user)


@pytest.fixture
def other_identity(services: ServiceRegistry) -> Identity:
    return Identity.of(services.identities.find_by_email("traveler@example.com"))


@pytest.fixture
def admin_identity(services: ServiceRegistry) -> Identity:
    return Identity.of(services.identities.find_by_email("admin@example.com"))


@pytest_asyncio.fixture
async def auth_token(services: ServiceRegistry) -> str:
    token, _ = await services.auth.login("test@example.com", TEST_PASSWORD)
    return token


@pytest_asyncio.fixture
async def auth_headers(auth_token: str) -> dict:
    """Authorization headers with Bearer token."""
    return {"Authorization": f"Bearer {auth_token}"}


@pytest_asyncio.fixture
async def other_headers(services: ServiceRegistry) -> dict:
    token, _ = await services.auth.login("traveler@example.com", TEST_PASSWORD)
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def admin_headers(services: ServiceRegistry) -> dict:
    token, _ = await services.auth.login("admin@example.com", ADMIN_PASSWORD)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_payload():
    return booking_payload


@pytest.fixture
def settings_factory(tmp_path: Path):
    def factory(**overrides) -> Settings:
        return make_settings(tmp_path, **overrides)
    return factory
