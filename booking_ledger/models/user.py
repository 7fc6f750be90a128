"""
User record as stored in the `users` collection.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field, model_validator

from booking_ledger.models.base import Record, utcnow


class Role(str, Enum):
    USER = "user"
    ADMIN = "admin"
    AGENT = "agent"
    MANAGER = "manager"


class User(Record):
    id: str
    email: str
    password_hash: Optional[str] = None
    role: Role = Role.USER
    created_at: datetime = Field(default_factory=utcnow)

    @model_validator(mode="before")
    @classmethod
    def _legacy_password_field(cls, data):
        # Records written by the old register route keep the bcrypt hash
        # under "password"; cleartext values are left alone and never verify.
        if isinstance(data, dict) and not data.get("passwordHash") and not data.get("password_hash"):
            legacy = data.get("password")
            if isinstance(legacy, str) and legacy.startswith(("$2a$", "$2b$", "$2y$")):
                data = {**data, "passwordHash": legacy}
        return data

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email={self.email}, role={self.role.value})>"
