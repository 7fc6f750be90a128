"""
Password hashing and session token primitives.
"""

import re
import secrets
from functools import lru_cache
from typing import Optional

from passlib.context import CryptContext

from booking_ledger.core.config import get_settings

TOKEN_BYTES = 32
_TOKEN_PATTERN = re.compile(r"^[A-Za-z0-9_-]{32,128}$")


@lru_cache()
def get_password_context() -> CryptContext:
    return CryptContext(
        schemes=["bcrypt"],
        deprecated="auto",
        bcrypt__rounds=get_settings().BCRYPT_ROUNDS,
    )


def hash_password(password: str) -> str:
    return get_password_context().hash(password)


def verify_password(password: str, password_hash: Optional[str]) -> bool:
    """
    Check a password against a stored hash.

    Anything that is not a recognised hash (missing value, cleartext
    password left in a seed file) never verifies. A dummy verify still
    runs so unknown accounts take as long as known ones.
    """
    context = get_password_context()
    if not password_hash or context.identify(password_hash, required=False) is None:
        context.dummy_verify()
        return False
    return context.verify(password, password_hash)


def generate_session_token() -> str:
    return secrets.token_urlsafe(TOKEN_BYTES)


def is_well_formed_token(token: Optional[str]) -> bool:
    return bool(token) and _TOKEN_PATTERN.match(token) is not None
