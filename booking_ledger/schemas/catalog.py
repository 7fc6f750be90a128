"""
Pydantic schemas for trips and favorites.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

camel_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class HotelResponse(BaseModel):
    model_config = camel_config

    id: str
    name: str
    location: Optional[str] = None
    price_per_night: float
    rating: Optional[float] = None


class CarRentalResponse(BaseModel):
    model_config = camel_config

    id: str
    company: str
    model: Optional[str] = None
    type: Optional[str] = None
    price_per_day: float


class TripResponse(BaseModel):
    model_config = camel_config

    id: str
    destination: str
    price: float
    description: Optional[str] = None
    image_url: Optional[str] = None
    dates_available: list[str] = []
    hotels: list[HotelResponse] = []
    car_rentals: list[CarRentalResponse] = []
    category: Optional[str] = None
    duration: Optional[int] = None
    max_travelers: Optional[int] = None


class FavoriteCreate(BaseModel):
    model_config = camel_config

    trip_id: str = Field(..., min_length=1)


class FavoriteResponse(BaseModel):
    model_config = camel_config

    id: str
    trip_id: str
    created_at: datetime
    trip: Optional[TripResponse] = None
