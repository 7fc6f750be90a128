"""
Read-only trip catalog over the `trips` collection.
"""

from typing import Any, Iterable, Optional

from booking_ledger.core.exceptions import NotFound
from booking_ledger.models.trip import Trip


class TripCatalog:
    def __init__(self, trips: Iterable[Trip] = ()):
        self._trips: dict[str, Trip] = {trip.id: trip for trip in trips}

    @classmethod
    def from_records(cls, records: Iterable[dict[str, Any]]) -> "TripCatalog":
        return cls(Trip.from_record(record) for record in records)

    def all(self) -> list[Trip]:
        return list(self._trips.values())

    def find(self, trip_id: str) -> Optional[Trip]:
        return self._trips.get(trip_id)

    def get(self, trip_id: str) -> Trip:
        trip = self._trips.get(trip_id)
        if trip is None:
            raise NotFound(f"Trip {trip_id} not found")
        return trip
