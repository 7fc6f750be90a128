"""
Tests for the session store backends.
"""

from unittest.mock import AsyncMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from booking_ledger.core.config import Settings
from booking_ledger.core.exceptions import PersistenceError
from booking_ledger.services.interfaces.memory_session_store import InMemorySessionStore
from booking_ledger.services.redis_session_store import RedisSessionStore
from booking_ledger.services.session_factory import create_session_store


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.mark.asyncio
async def test_memory_store_round_trip():
    sessions = InMemorySessionStore()
    await sessions.save("token-a", "1", ttl_seconds=60)

    assert await sessions.get("token-a") == "1"
    assert await sessions.get("token-b") is None


@pytest.mark.asyncio
async def test_memory_store_expires_sessions():
    clock = FakeClock()
    sessions = InMemorySessionStore(clock=clock)
    await sessions.save("token-a", "1", ttl_seconds=60)

    clock.now = 59
    assert await sessions.get("token-a") == "1"

    clock.now = 60
    assert await sessions.get("token-a") is None
    assert len(sessions) == 0


@pytest.mark.asyncio
async def test_memory_store_purges_on_save():
    clock = FakeClock()
    sessions = InMemorySessionStore(clock=clock)
    await sessions.save("old", "1", ttl_seconds=10)

    clock.now = 20
    await sessions.save("new", "2", ttl_seconds=10)
    assert len(sessions) == 1


@pytest.mark.asyncio
async def test_memory_store_revoke():
    sessions = InMemorySessionStore()
    await sessions.save("token-a", "1", ttl_seconds=60)

    await sessions.revoke("token-a")
    await sessions.revoke("token-a")
    assert await sessions.get("token-a") is None


@pytest.mark.asyncio
async def test_redis_store_uses_setex():
    client = AsyncMock()
    client.get.return_value = "1"
    sessions = RedisSessionStore(client)

    await sessions.save("token-a", "1", ttl_seconds=3600)
    client.setex.assert_awaited_once_with("session:token-a", 3600, "1")

    assert await sessions.get("token-a") == "1"
    client.get.assert_awaited_once_with("session:token-a")

    await sessions.revoke("token-a")
    client.delete.assert_awaited_once_with("session:token-a")


@pytest.mark.asyncio
async def test_redis_lookup_failure_is_unauthenticated():
    client = AsyncMock()
    client.get.side_effect = RedisConnectionError("down")

    assert await RedisSessionStore(client).get("token-a") is None


@pytest.mark.asyncio
async def test_redis_save_failure_raises():
    client = AsyncMock()
    client.setex.side_effect = RedisConnectionError("down")

    with pytest.raises(PersistenceError):
        await RedisSessionStore(client).save("token-a", "1", ttl_seconds=60)


@pytest.mark.asyncio
async def test_factory_defaults_to_memory(tmp_path):
    settings = Settings(DATA_FILE=str(tmp_path / "db.json"), SESSION_BACKEND="memory")
    assert isinstance(await create_session_store(settings), InMemorySessionStore)


@pytest.mark.asyncio
async def test_factory_rejects_unknown_backend(tmp_path):
    settings = Settings(DATA_FILE=str(tmp_path / "db.json"), SESSION_BACKEND="memcached")
    with pytest.raises(ValueError):
        await create_session_store(settings)
