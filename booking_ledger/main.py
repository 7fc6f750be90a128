"""
Southwest Vacations Booking Ledger - Main Application Entry Point

A small booking service demonstrating:
- Session-token authentication with a swappable session store
- A single-writer booking ledger with flush-before-commit semantics
- Atomic JSON file persistence with bounded retries and deadlines
- Structured logging with request correlation and Prometheus metrics
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from booking_ledger.core.config import get_settings
from booking_ledger.core.logging import setup_logging, get_logger
from booking_ledger.core.metrics import metrics_endpoint
from booking_ledger.api.router import api_router
from booking_ledger.api.middleware import RequestLoggingMiddleware
from booking_ledger.api.error_handlers import setup_exception_handlers
from booking_ledger.infrastructure.redis_client import close_redis
from booking_ledger.services.registry import build_registry

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifecycle: startup and shutdown hooks."""
    setup_logging()
    logger = get_logger(__name__)

    logger.info(
        "application_starting",
        app=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
        data_file=settings.DATA_FILE,
        session_backend=settings.SESSION_BACKEND,
    )

    app.state.services = await build_registry(settings)
    if settings.AUTO_CONFIRM_BOOKINGS:
        logger.warning("auto_confirm_enabled", message="Bookings skip the pending state")

    yield

    if settings.SESSION_BACKEND == "redis":
        await close_redis()
    logger.info("application_shutdown")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Booking ledger for Southwest Vacations trips",
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Restrict in production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Custom middleware
app.add_middleware(RequestLoggingMiddleware)

setup_exception_handlers(app)

# Routes
app.include_router(api_router)


@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint for Docker and load balancers."""
    services = getattr(app.state, "services", None)
    return {
        "status": "healthy" if services else "starting",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "bookings": len(services.ledger) if services else None,
        "users": len(services.identities) if services else None,
    }


@app.get("/metrics", tags=["Health"], include_in_schema=False)
def metrics():
    return metrics_endpoint()


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": f"Welcome to {settings.APP_NAME}",
        "version": settings.APP_VERSION,
        "docs": "/docs",
    }
