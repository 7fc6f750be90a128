from booking_ledger.models.base import Record
from booking_ledger.models.user import User, Role
from booking_ledger.models.booking import Booking, BookingStatus, TripType
from booking_ledger.models.favorite import Favorite
from booking_ledger.models.trip import Trip, Hotel, CarRental

__all__ = [
    "Record",
    "User", "Role",
    "Booking", "BookingStatus", "TripType",
    "Favorite",
    "Trip", "Hotel", "CarRental",
]
