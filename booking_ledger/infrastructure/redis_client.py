"""
Redis client for the session store.
Separated from business logic for clean architecture.
"""

from typing import Optional

import redis.asyncio as redis

from booking_ledger.core.config import get_settings
from booking_ledger.core.logging import get_logger

logger = get_logger(__name__)


class RedisClient:
    """Process-wide async Redis client with connection pooling."""

    _instance: Optional[redis.Redis] = None

    @classmethod
    async def get_client(cls) -> redis.Redis:
        """Get or create Redis client instance. Raises if Redis is unreachable."""
        if cls._instance is None:
            settings = get_settings()
            client = redis.from_url(
                settings.REDIS_URL,
                encoding="utf-8",
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=5,
                retry_on_timeout=True,
                health_check_interval=30,
            )
            await client.ping()
            logger.info("redis_connected", url=settings.REDIS_URL)
            cls._instance = client
        return cls._instance

    @classmethod
    async def close(cls) -> None:
        """Close Redis connection."""
        if cls._instance is not None:
            await cls._instance.aclose()
            cls._instance = None


async def get_redis() -> redis.Redis:
    """Get Redis client instance."""
    return await RedisClient.get_client()


async def close_redis() -> None:
    await RedisClient.close()
