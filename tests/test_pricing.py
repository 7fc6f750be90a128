"""
Tests for catalog-based price quotes.
"""

from datetime import date, timedelta

import pytest

from booking_ledger.core.exceptions import ValidationError
from booking_ledger.schemas.booking import BookingCreate
from booking_ledger.seed import SEED_TRIPS
from booking_ledger.services.catalog_service import TripCatalog
from booking_ledger.services.pricing import CatalogPricing

START = date.today() + timedelta(days=30)


@pytest.fixture
def pricing() -> CatalogPricing:
    return CatalogPricing(TripCatalog.from_records(SEED_TRIPS))


def quote(pricing: CatalogPricing, **fields) -> float:
    payload = {"tripId": "trip1", "travelers": 2, "startDate": START, "tripType": "one-way"}
    payload.update(fields)
    return pricing.quote(BookingCreate.model_validate(payload))


def test_trip_price_per_traveler(pricing):
    assert quote(pricing) == 2598.0
    assert quote(pricing, travelers=1) == 1299.0


def test_round_trip_prices_extras_per_night(pricing):
    total = quote(
        pricing,
        tripType="round-trip",
        returnDate=START + timedelta(days=4),
        hotelId="hotel1",
        carRentalId="car1",
    )
    assert total == 2598.0 + 4 * 289 + 4 * 89


def test_one_way_extras_use_trip_duration(pricing):
    assert quote(pricing, tripId="trip2", travelers=1, hotelId="hotel3") == 899.0 + 5 * 210


def test_unknown_trip(pricing):
    with pytest.raises(ValidationError):
        quote(pricing, tripId="atlantis")


def test_hotel_from_another_trip(pricing):
    with pytest.raises(ValidationError):
        quote(pricing, hotelId="hotel3")


def test_unknown_car_rental(pricing):
    with pytest.raises(ValidationError):
        quote(pricing, tripId="trip3", carRentalId="car1")


def test_max_travelers(pricing):
    assert quote(pricing, tripId="trip2", travelers=6) == 6 * 899.0
    with pytest.raises(ValidationError):
        quote(pricing, tripId="trip2", travelers=7)
