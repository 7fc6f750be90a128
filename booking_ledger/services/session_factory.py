"""
Session store factory.
Configures which session backend the authentication gate uses.
"""

from booking_ledger.core.config import Settings
from booking_ledger.infrastructure.redis_client import get_redis
from booking_ledger.services.interfaces.session_store import SessionStore
from booking_ledger.services.interfaces.memory_session_store import InMemorySessionStore
from booking_ledger.services.redis_session_store import RedisSessionStore


async def create_session_store(settings: Settings) -> SessionStore:
    """
    Get configured session store.

    Backend selection via SESSION_BACKEND:
    - memory: InMemorySessionStore (single process, default)
    - redis: RedisSessionStore (shared across workers)
    """
    backend = settings.SESSION_BACKEND.lower()

    if backend == 'redis':
        return RedisSessionStore(await get_redis())
    if backend == 'memory':
        return InMemorySessionStore()
    raise ValueError(f"Unknown SESSION_BACKEND: {settings.SESSION_BACKEND!r}")
