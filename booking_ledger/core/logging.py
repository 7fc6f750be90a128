"""
Structured logging configuration using structlog.
Outputs JSON in production, pretty-printed in development.

Every event carries the request id bound by the middleware, plus the service
name and environment. Credential-bearing keys (passwords, hashes, session
tokens) are masked before rendering, whichever logger emitted them.
"""

import logging
import sys
from typing import Any

import structlog

from booking_ledger.core.config import get_settings

REDACTED = "***"
SENSITIVE_KEYS = frozenset({
    "password",
    "password_hash",
    "passwordhash",
    "token",
    "access_token",
    "authorization",
})

_configured = False


def redact_credentials(logger: Any, method_name: str, event_dict: dict) -> dict:
    for key in event_dict:
        if key.lower() in SENSITIVE_KEYS and event_dict[key] is not None:
            event_dict[key] = REDACTED
    return event_dict


def _service_context(app_name: str, environment: str):
    def add_service_context(logger: Any, method_name: str, event_dict: dict) -> dict:
        event_dict.setdefault("service", app_name)
        event_dict.setdefault("env", environment)
        return event_dict
    return add_service_context


def setup_logging() -> None:
    """Configure structlog and the root logger. Safe to call more than once."""
    global _configured
    if _configured:
        return

    settings = get_settings()
    production = settings.ENVIRONMENT == "production"

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        redact_credentials,
    ]
    if production:
        # Console output stays short; aggregated logs need the service tags
        shared_processors.append(_service_context(settings.APP_NAME, settings.ENVIRONMENT))
        shared_processors.append(structlog.processors.format_exc_info)
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # foreign_pre_chain runs for records from uvicorn and other stdlib loggers
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    ))

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("passlib").setLevel(logging.ERROR)

    _configured = True


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)
