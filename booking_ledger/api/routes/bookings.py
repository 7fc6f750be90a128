"""
Booking endpoints: create, list, confirm and cancel.
"""

from datetime import date
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, status

from booking_ledger.api.deps import get_current_identity, get_ledger, require_admin
from booking_ledger.models.booking import BookingStatus
from booking_ledger.schemas.booking import BookingCreate, BookingResponse
from booking_ledger.services.auth_service import Identity
from booking_ledger.services.booking_service import BookingLedger

router = APIRouter(prefix="/bookings", tags=["Bookings"])


@router.post("/", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking_data: BookingCreate,
    identity: Identity = Depends(get_current_identity),
    ledger: BookingLedger = Depends(get_ledger),
):
    """
    Book a trip for the authenticated user.

    The booking is written to disk before it is returned; if the write fails
    the request fails and no booking is recorded.
    """
    return await ledger.create(identity.user_id, booking_data)


@router.get("/", response_model=list[BookingResponse])
async def list_user_bookings(
    status: Optional[BookingStatus] = None,
    identity: Identity = Depends(get_current_identity),
    ledger: BookingLedger = Depends(get_ledger),
):
    """Get all bookings for the authenticated user, oldest first."""
    return ledger.list_by_owner(identity.user_id, status=status)


@router.get("/all", response_model=list[BookingResponse])
async def list_all_bookings(
    status: Optional[BookingStatus] = None,
    start_date: Optional[date] = Query(None, alias="startDate"),
    end_date: Optional[date] = Query(None, alias="endDate"),
    search: Optional[str] = Query(None, max_length=200),
    sort_by: Optional[Literal["createdAt", "startDate", "totalPrice"]] = Query(None, alias="sortBy"),
    sort_order: Literal["asc", "desc"] = Query("desc", alias="sortOrder"),
    limit: Optional[int] = Query(None, ge=1),
    admin: Identity = Depends(require_admin),
    ledger: BookingLedger = Depends(get_ledger),
):
    """
    Every booking in the ledger. Admin only.

    startDate/endDate bound the trip start date; sortOrder only applies
    together with sortBy, otherwise bookings come back oldest first.
    """
    return ledger.list_all(
        status=status,
        start_from=start_date,
        start_to=end_date,
        search=search,
        sort_by=sort_by,
        descending=sort_order == "desc",
        limit=limit,
    )


@router.get("/{booking_id}", response_model=BookingResponse)
async def get_booking(
    booking_id: str,
    identity: Identity = Depends(get_current_identity),
    ledger: BookingLedger = Depends(get_ledger),
):
    return ledger.get(booking_id, identity)


@router.post("/{booking_id}/confirm", response_model=BookingResponse)
async def confirm_booking(
    booking_id: str,
    identity: Identity = Depends(get_current_identity),
    ledger: BookingLedger = Depends(get_ledger),
):
    """Confirm a pending booking and issue its confirmation code."""
    return await ledger.confirm(booking_id, identity)


@router.delete("/{booking_id}", response_model=BookingResponse)
async def cancel_booking(
    booking_id: str,
    identity: Identity = Depends(get_current_identity),
    ledger: BookingLedger = Depends(get_ledger),
):
    """Cancel a booking. The record is kept with status `cancelled`."""
    return await ledger.cancel(booking_id, identity)
