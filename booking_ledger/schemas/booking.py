"""
Pydantic schemas for booking-related request/response validation.
"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from booking_ledger.models.booking import BookingStatus, TripType

camel_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BookingCreate(BaseModel):
    model_config = camel_config

    trip_id: str = Field(..., min_length=1)
    travelers: int = Field(default=1, ge=1)
    start_date: date
    return_date: Optional[date] = None
    trip_type: TripType = TripType.ONE_WAY
    full_name: Optional[str] = Field(None, max_length=200)
    email: Optional[str] = Field(None, max_length=255)
    special_requests: Optional[str] = Field(None, max_length=1000)
    departure_time: Optional[str] = None
    return_time: Optional[str] = None
    hotel_id: Optional[str] = None
    car_rental_id: Optional[str] = None

    @model_validator(mode="after")
    def _check_return_date(self):
        if self.trip_type == TripType.ROUND_TRIP:
            if self.return_date is None:
                raise ValueError("returnDate is required for round-trip bookings")
            if self.return_date <= self.start_date:
                raise ValueError("returnDate must be after startDate")
        return self


class BookingResponse(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

    id: str
    user_id: str
    trip_id: str
    full_name: Optional[str] = None
    email: Optional[str] = None
    travelers: int
    start_date: date
    return_date: Optional[date] = None
    trip_type: TripType
    special_requests: Optional[str] = None
    departure_time: Optional[str] = None
    return_time: Optional[str] = None
    hotel_id: Optional[str] = None
    car_rental_id: Optional[str] = None
    status: BookingStatus
    confirmation_code: Optional[str] = None
    total_price: float
    created_at: datetime
    updated_at: Optional[datetime] = None
    confirmed_at: Optional[datetime] = None
