"""
Session store interface.
Maps opaque session tokens to user ids with an expiry.
"""

from abc import ABC, abstractmethod
from typing import Optional


class SessionStore(ABC):
    """
    Interface for session token storage.

    Implementations:
    - InMemorySessionStore: dict in the API process, lost on restart
    - RedisSessionStore: SETEX keys, shared across workers
    """

    @abstractmethod
    async def save(self, token: str, user_id: str, ttl_seconds: int) -> None:
        """
        Store a new session.

        Args:
            token: Opaque session token
            user_id: Owner of the session
            ttl_seconds: Lifetime of the session
        """
        pass

    @abstractmethod
    async def get(self, token: str) -> Optional[str]:
        """
        Look up a session.

        Returns:
            The user id, or None if the token is unknown or expired
        """
        pass

    @abstractmethod
    async def revoke(self, token: str) -> None:
        """Delete a session. Unknown tokens are ignored."""
        pass
