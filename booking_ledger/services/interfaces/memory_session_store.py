"""
In-process session store - no external dependencies.
"""

import asyncio
import time
from typing import Callable, Optional

from booking_ledger.services.interfaces.session_store import SessionStore


class InMemorySessionStore(SessionStore):
    """
    Sessions kept in a dict keyed by token.

    Use when:
    - Single API process
    - Development and tests
    - Losing sessions on restart is acceptable
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._sessions: dict[str, tuple[str, float]] = {}
        self._lock = asyncio.Lock()

    async def save(self, token: str, user_id: str, ttl_seconds: int) -> None:
        async with self._lock:
            self._purge_expired()
            self._sessions[token] = (user_id, self._clock() + ttl_seconds)

    async def get(self, token: str) -> Optional[str]:
        async with self._lock:
            entry = self._sessions.get(token)
            if entry is None:
                return None
            user_id, expires_at = entry
            if expires_at <= self._clock():
                del self._sessions[token]
                return None
            return user_id

    async def revoke(self, token: str) -> None:
        async with self._lock:
            self._sessions.pop(token, None)

    def __len__(self) -> int:
        return len(self._sessions)

    def _purge_expired(self) -> None:
        now = self._clock()
        expired = [token for token, (_, expires_at) in self._sessions.items() if expires_at <= now]
        for token in expired:
            del self._sessions[token]
