"""
Read-only lookup of user records loaded from the `users` collection.
"""

from typing import Any, Iterable, Optional

from booking_ledger.core.logging import get_logger
from booking_ledger.models.user import User

logger = get_logger(__name__)


class IdentityStore:
    def __init__(self, users: Iterable[User] = ()):
        self._by_id: dict[str, User] = {}
        self._by_email: dict[str, User] = {}
        for user in users:
            if user.email in self._by_email:
                logger.warning("duplicate_user_email", email=user.email, ignored_id=user.id)
                continue
            if user.id in self._by_id:
                logger.warning("duplicate_user_id", user_id=user.id)
                continue
            self._by_id[user.id] = user
            self._by_email[user.email] = user

    @classmethod
    def from_records(cls, records: Iterable[dict[str, Any]]) -> "IdentityStore":
        return cls(User.from_record(record) for record in records)

    def find_by_email(self, email: str) -> Optional[User]:
        return self._by_email.get(email)

    def find_by_id(self, user_id: str) -> Optional[User]:
        return self._by_id.get(user_id)

    def __len__(self) -> int:
        return len(self._by_id)
