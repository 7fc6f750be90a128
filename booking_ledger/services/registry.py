"""
Builds the per-process service graph.

The registry is created once (application lifespan, CLI command or test
fixture) and handed to request handlers through app.state; no service keeps
module-level state.
"""

from dataclasses import dataclass
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from booking_ledger.core.config import Settings
from booking_ledger.core.exceptions import PersistenceError
from booking_ledger.core.logging import get_logger
from booking_ledger.infrastructure.json_store import JsonFileStore
from booking_ledger.seed import build_seed_collections
from booking_ledger.services.auth_service import AuthGate
from booking_ledger.services.booking_service import BookingLedger
from booking_ledger.services.catalog_service import TripCatalog
from booking_ledger.services.favorites_service import FavoritesService
from booking_ledger.services.identity_store import IdentityStore
from booking_ledger.services.interfaces.session_store import SessionStore
from booking_ledger.services.pricing import CatalogPricing
from booking_ledger.services.session_factory import create_session_store

logger = get_logger(__name__)


@dataclass
class ServiceRegistry:
    settings: Settings
    store: JsonFileStore
    identities: IdentityStore
    sessions: SessionStore
    auth: AuthGate
    catalog: TripCatalog
    ledger: BookingLedger
    favorites: FavoritesService


def create_store(settings: Settings) -> JsonFileStore:
    return JsonFileStore(
        settings.DATA_FILE,
        settings.BACKUP_DIR,
        timeout=settings.PERSISTENCE_TIMEOUT_SECONDS,
        max_attempts=settings.PERSISTENCE_MAX_ATTEMPTS,
    )


async def build_registry(
    settings: Settings,
    sessions: Optional[SessionStore] = None,
) -> ServiceRegistry:
    store = create_store(settings)
    collections = await store.load()

    if settings.SEED_ON_STARTUP:
        # Only empty collections are filled; existing data is never replaced
        missing = {
            name: items
            for name, items in build_seed_collections().items()
            if items and not collections.get(name)
        }
        if missing:
            await store.flush(missing)
            collections.update(missing)
            logger.info("store_seeded", collections=sorted(missing))

    try:
        identities = IdentityStore.from_records(collections["users"])
        catalog = TripCatalog.from_records(collections["trips"])
    except PydanticValidationError as e:
        raise PersistenceError(f"Stored users or trips are corrupt: {e.error_count()} invalid field(s)") from e

    if sessions is None:
        sessions = await create_session_store(settings)

    ledger = BookingLedger(
        store,
        identities,
        CatalogPricing(catalog),
        auto_confirm=settings.AUTO_CONFIRM_BOOKINGS,
        code_length=settings.CONFIRMATION_CODE_LENGTH,
    )
    ledger.load(collections["bookings"])

    favorites = FavoritesService(store, catalog)
    favorites.load(collections["favorites"])

    return ServiceRegistry(
        settings=settings,
        store=store,
        identities=identities,
        sessions=sessions,
        auth=AuthGate(identities, sessions, ttl_seconds=settings.SESSION_TTL_MINUTES * 60),
        catalog=catalog,
        ledger=ledger,
        favorites=favorites,
    )
