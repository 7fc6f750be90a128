"""
Read-only trip catalog entries, with the hotels and car rentals that can be
added to a booking.
"""

from typing import Optional

from pydantic import Field

from booking_ledger.models.base import Record


class Hotel(Record):
    id: str
    name: str
    location: Optional[str] = None
    price_per_night: float = Field(ge=0)
    rating: Optional[float] = None


class CarRental(Record):
    id: str
    company: str
    model: Optional[str] = None
    type: Optional[str] = None
    price_per_day: float = Field(ge=0)


class Trip(Record):
    id: str
    destination: str
    price: float = Field(ge=0)
    description: Optional[str] = None
    image_url: Optional[str] = None
    dates_available: list[str] = Field(default_factory=list)
    hotels: list[Hotel] = Field(default_factory=list)
    car_rentals: list[CarRental] = Field(default_factory=list)
    category: Optional[str] = None
    duration: Optional[int] = None
    max_travelers: Optional[int] = None

    def find_hotel(self, hotel_id: str) -> Optional[Hotel]:
        return next((h for h in self.hotels if h.id == hotel_id), None)

    def find_car_rental(self, car_rental_id: str) -> Optional[CarRental]:
        return next((c for c in self.car_rentals if c.id == car_rental_id), None)
