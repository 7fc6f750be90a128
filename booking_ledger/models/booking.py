"""
Booking record representing a user's reservation for a trip.

Key design decisions:
- Status field allows cancellation without deleting records
- confirmation_code is only set once the booking reaches `confirmed`
- Unknown fields from older clients are preserved on the record
"""

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from booking_ledger.models.base import Record, utcnow


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"


class TripType(str, Enum):
    ONE_WAY = "one-way"
    ROUND_TRIP = "round-trip"


class Booking(Record):
    id: str
    user_id: str
    trip_id: str
    full_name: Optional[str] = None
    email: Optional[str] = None
    travelers: int = 1
    start_date: date
    return_date: Optional[date] = None
    trip_type: TripType = TripType.ONE_WAY
    special_requests: Optional[str] = None
    departure_time: Optional[str] = None
    return_time: Optional[str] = None
    hotel_id: Optional[str] = None
    car_rental_id: Optional[str] = None
    status: BookingStatus = BookingStatus.PENDING
    confirmation_code: Optional[str] = None
    total_price: float = 0
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: Optional[datetime] = None
    confirmed_at: Optional[datetime] = None

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, user={self.user_id}, trip={self.trip_id}, status={self.status.value})>"
