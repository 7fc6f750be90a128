from booking_ledger.schemas.user import UserLogin, UserResponse, Token
from booking_ledger.schemas.booking import BookingCreate, BookingResponse
from booking_ledger.schemas.catalog import TripResponse, FavoriteCreate, FavoriteResponse

__all__ = [
    "UserLogin", "UserResponse", "Token",
    "BookingCreate", "BookingResponse",
    "TripResponse", "FavoriteCreate", "FavoriteResponse",
]
