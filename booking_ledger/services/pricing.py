"""
Booking price quotes.

total = trip.price * travelers
      + hotel.pricePerNight * nights      (if a hotel is selected)
      + car.pricePerDay * nights          (if a car rental is selected)

nights is the stay length for round trips, otherwise the trip's advertised
duration (1 if the catalog has none).
"""

from abc import ABC, abstractmethod
from decimal import Decimal, ROUND_HALF_UP

from booking_ledger.core.exceptions import ValidationError
from booking_ledger.models.booking import TripType
from booking_ledger.schemas.booking import BookingCreate
from booking_ledger.services.catalog_service import TripCatalog

CENTS = Decimal("0.01")


class PricingStrategy(ABC):
    @abstractmethod
    def quote(self, payload: BookingCreate) -> float:
        """Total price for a validated booking payload. Raises ValidationError."""
        pass


class CatalogPricing(PricingStrategy):
    def __init__(self, catalog: TripCatalog):
        self.catalog = catalog

    def quote(self, payload: BookingCreate) -> float:
        trip = self.catalog.find(payload.trip_id)
        if trip is None:
            raise ValidationError(f"Unknown trip {payload.trip_id}", field="tripId")

        if trip.max_travelers is not None and payload.travelers > trip.max_travelers:
            raise ValidationError(
                f"At most {trip.max_travelers} travelers allowed for this trip",
                field="travelers",
            )

        if payload.trip_type == TripType.ROUND_TRIP and payload.return_date:
            nights = (payload.return_date - payload.start_date).days
        else:
            nights = trip.duration or 1

        total = Decimal(str(trip.price)) * payload.travelers

        if payload.hotel_id:
            hotel = trip.find_hotel(payload.hotel_id)
            if hotel is None:
                raise ValidationError(f"Hotel {payload.hotel_id} is not offered on this trip", field="hotelId")
            total += Decimal(str(hotel.price_per_night)) * nights

        if payload.car_rental_id:
            car = trip.find_car_rental(payload.car_rental_id)
            if car is None:
                raise ValidationError(
                    f"Car rental {payload.car_rental_id} is not offered on this trip",
                    field="carRentalId",
                )
            total += Decimal(str(car.price_per_day)) * nights

        return float(total.quantize(CENTS, rounding=ROUND_HALF_UP))
