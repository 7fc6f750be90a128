from datetime import datetime

from pydantic import Field

from booking_ledger.models.base import Record, utcnow


class Favorite(Record):
    id: str
    user_id: str
    trip_id: str
    created_at: datetime = Field(default_factory=utcnow)
