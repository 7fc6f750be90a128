"""
Authentication gate: login, session resolution and logout.

Tokens are opaque random strings. The gate keeps no state of its own; the
token -> user id mapping lives in a SessionStore with a TTL, so the backend
can be swapped without touching the ledger.
"""

from dataclasses import dataclass
from typing import Optional

from booking_ledger.core.exceptions import InvalidCredentials, Unauthenticated
from booking_ledger.core.logging import get_logger
from booking_ledger.core.metrics import record_login
from booking_ledger.core.security import (
    generate_session_token,
    is_well_formed_token,
    verify_password,
)
from booking_ledger.models.user import Role, User
from booking_ledger.services.identity_store import IdentityStore
from booking_ledger.services.interfaces.session_store import SessionStore

logger = get_logger(__name__)


@dataclass(frozen=True)
class Identity:
    user_id: str
    email: str
    role: Role

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @classmethod
    def of(cls, user: User) -> "Identity":
        return cls(user_id=user.id, email=user.email, role=user.role)


class AuthGate:
    def __init__(self, identities: IdentityStore, sessions: SessionStore, ttl_seconds: int):
        self.identities = identities
        self.sessions = sessions
        self.ttl_seconds = ttl_seconds

    async def login(self, email: str, password: str) -> tuple[str, User]:
        """
        Verify credentials and open a session.
        Raises InvalidCredentials for an unknown email or wrong password.
        """
        user = self.identities.find_by_email(email)
        password_hash = user.password_hash if user else None

        if not verify_password(password, password_hash) or user is None:
            record_login(False)
            logger.warning("login_failed", email=email)
            raise InvalidCredentials()

        token = generate_session_token()
        await self.sessions.save(token, user.id, self.ttl_seconds)

        record_login(True)
        logger.info("user_logged_in", user_id=user.id)
        return token, user

    async def resolve(self, token: Optional[str]) -> Identity:
        """Resolve a bearer token to the caller's identity, failing closed."""
        if not is_well_formed_token(token):
            raise Unauthenticated("Missing or malformed bearer token")

        user_id = await self.sessions.get(token)
        if user_id is None:
            raise Unauthenticated("Session expired or unknown")

        user = self.identities.find_by_id(user_id)
        if user is None:
            logger.warning("session_user_missing", user_id=user_id)
            await self.sessions.revoke(token)
            raise Unauthenticated("Session user no longer exists")

        return Identity.of(user)

    async def logout(self, token: str) -> None:
        await self.sessions.revoke(token)
        logger.info("user_logged_out")
