"""
Saved trips per user, persisted in the `favorites` collection.
Uses the same flush-before-commit pattern as the booking ledger.
"""

import asyncio
from typing import Any, Iterable, Optional
from uuid import uuid4

from pydantic import ValidationError as PydanticValidationError

from booking_ledger.core.exceptions import Conflict, NotFound, PersistenceError
from booking_ledger.core.logging import get_logger
from booking_ledger.infrastructure.json_store import JsonFileStore
from booking_ledger.models.favorite import Favorite
from booking_ledger.services.catalog_service import TripCatalog

logger = get_logger(__name__)


class FavoritesService:
    def __init__(self, store: JsonFileStore, catalog: TripCatalog):
        self.store = store
        self.catalog = catalog
        self._favorites: list[Favorite] = []
        self._lock = asyncio.Lock()

    def load(self, records: Iterable[dict[str, Any]]) -> None:
        try:
            self._favorites = [Favorite.from_record(record) for record in records]
        except PydanticValidationError as e:
            raise PersistenceError(f"Stored favorites are corrupt: {e.error_count()} invalid field(s)") from e

    async def add(self, owner_id: str, trip_id: str, timeout: Optional[float] = None) -> Favorite:
        """Save a trip. Raises NotFound for unknown trips and Conflict for duplicates."""
        self.catalog.get(trip_id)

        async with self._lock:
            if any(f.user_id == owner_id and f.trip_id == trip_id for f in self._favorites):
                raise Conflict("Trip already in favorites")

            favorite = Favorite(id=str(uuid4()), user_id=owner_id, trip_id=trip_id)
            snapshot = [*self._favorites, favorite]
            await self._persist(snapshot, timeout)
            self._favorites = snapshot

        logger.info("favorite_added", favorite_id=favorite.id, user_id=owner_id, trip_id=trip_id)
        return favorite

    def list_by_owner(self, owner_id: str) -> list[Favorite]:
        return [f for f in self._favorites if f.user_id == owner_id]

    async def remove(self, owner_id: str, favorite_id: str, timeout: Optional[float] = None) -> None:
        async with self._lock:
            # Someone else's favorite looks the same as a missing one
            if not any(f.id == favorite_id and f.user_id == owner_id for f in self._favorites):
                raise NotFound("Favorite not found")

            snapshot = [f for f in self._favorites if f.id != favorite_id]
            await self._persist(snapshot, timeout)
            self._favorites = snapshot

        logger.info("favorite_removed", favorite_id=favorite_id, user_id=owner_id)

    async def _persist(self, snapshot: list[Favorite], timeout: Optional[float]) -> None:
        await self.store.flush(
            {"favorites": [favorite.to_record() for favorite in snapshot]},
            timeout=timeout,
        )
