"""
Renders ledger errors as JSON responses.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from booking_ledger.core.exceptions import LedgerError
from booking_ledger.core.logging import get_logger

logger = get_logger(__name__)


def setup_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(LedgerError)
    async def ledger_error_handler(request: Request, exc: LedgerError):
        if exc.status_code >= 500:
            logger.error("ledger_error", error=exc.code, detail=exc.detail)
        else:
            logger.info("request_rejected", error=exc.code, detail=exc.detail)

        headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail, "error": exc.code},
            headers=headers,
        )
