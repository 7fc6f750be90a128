"""
Redis-backed session store.
Implements SessionStore using SETEX so Redis expires sessions itself.

Failure policy:
  Unlike a cache, sessions fail closed. If Redis is unreachable during a
  lookup the caller is treated as unauthenticated; a login that cannot store
  its session fails instead of handing out a token nobody can resolve.
"""

from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from booking_ledger.core.exceptions import PersistenceError
from booking_ledger.core.logging import get_logger
from booking_ledger.services.interfaces.session_store import SessionStore

logger = get_logger(__name__)

KEY_PREFIX = "session:"


class RedisSessionStore(SessionStore):
    """
    Sessions stored as `session:{token}` -> user id.

    Use when:
    - Several API workers must share sessions
    - Sessions should survive an API restart
    """

    def __init__(self, client: redis.Redis):
        self.redis = client

    async def save(self, token: str, user_id: str, ttl_seconds: int) -> None:
        try:
            await self.redis.setex(f"{KEY_PREFIX}{token}", ttl_seconds, user_id)
        except RedisError as e:
            logger.error("session_save_failed", error=str(e))
            raise PersistenceError("Could not store session") from e

    async def get(self, token: str) -> Optional[str]:
        try:
            return await self.redis.get(f"{KEY_PREFIX}{token}")
        except RedisError as e:
            logger.error("session_lookup_failed", error=str(e))
            return None

    async def revoke(self, token: str) -> None:
        try:
            await self.redis.delete(f"{KEY_PREFIX}{token}")
        except RedisError as e:
            logger.error("session_revoke_failed", error=str(e))
            raise PersistenceError("Could not revoke session") from e
