"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter
from booking_ledger.api.routes import auth, bookings, trips, favorites

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(auth.router)
api_router.include_router(bookings.router)
api_router.include_router(trips.router)
api_router.include_router(favorites.router)
