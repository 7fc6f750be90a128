"""
Application configuration using pydantic-settings.
All config is loaded from environment variables with sensible defaults.
"""

from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "Southwest Vacations Booking Ledger"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Persistence
    DATA_FILE: str = "data/db.json"
    BACKUP_DIR: str = "data-backups"
    SEED_ON_STARTUP: bool = True
    PERSISTENCE_TIMEOUT_SECONDS: float = 5.0
    PERSISTENCE_MAX_ATTEMPTS: int = 2  # first write + one retry

    # Bookings
    AUTO_CONFIRM_BOOKINGS: bool = False  # test-only shortcut, skips pending
    CONFIRMATION_CODE_LENGTH: int = 6

    # Sessions
    SESSION_BACKEND: str = "memory"  # memory, redis
    SESSION_TTL_MINUTES: int = 1440
    REDIS_URL: str = "redis://localhost:6379/0"

    # Password hashing
    BCRYPT_ROUNDS: int = 12

    model_config = {
        "env_file": ".env",
        "case_sensitive": True,
    }


@lru_cache()
def get_settings() -> Settings:
    return Settings()
