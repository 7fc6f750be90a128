"""
Booking ledger: the authoritative collection of bookings and their lifecycle.

CONCURRENCY STRATEGY: Single Writer, Flush Before Commit
========================================================

Problem:
  Two requests create a booking at the same time. Each copies the current
  collection, appends its record, and writes the file. The second write
  overwrites the first one: a lost update.

Solution:
  Every mutation (create, confirm, cancel) runs under one asyncio.Lock:

  1. Build the new collection as a copy: current bookings + change
  2. Flush the copy through the persistence adapter
  3. Only if the flush succeeded, swap the copy in as the live collection

  This gives:
  - No lost updates: mutations are strictly serialized within the process
  - No phantom records: a booking that failed to flush (PersistenceError or
    Timeout) was never visible to list_by_owner
  - Reads never take the lock; they see the last committed collection

Status lifecycle:
  pending -> confirmed -> cancelled
  pending -> cancelled
  cancelled is terminal. Bookings are never deleted.

  With auto_confirm enabled, create goes straight to confirmed. That mirrors
  the old mock backend and exists for end-to-end test environments; the
  honest default is pending until something confirms payment.

Confirmation codes:
  "SW" + random uppercase alphanumerics, drawn with `secrets` and re-drawn on
  collision with any code already in the ledger. Assigned only on the
  transition to confirmed.
"""

import asyncio
import secrets
import string
from datetime import date
from typing import Any, Callable, Iterable, Mapping, Optional, Union
from uuid import uuid4

from pydantic import ValidationError as PydanticValidationError

from booking_ledger.core.exceptions import (
    Forbidden,
    InvalidTransition,
    LedgerError,
    NotFound,
    PersistenceError,
    UnknownOwner,
    ValidationError,
)
from booking_ledger.core.logging import get_logger
from booking_ledger.core.metrics import record_booking_operation
from booking_ledger.infrastructure.json_store import JsonFileStore
from booking_ledger.models.base import utcnow
from booking_ledger.models.booking import Booking, BookingStatus
from booking_ledger.schemas.booking import BookingCreate
from booking_ledger.services.auth_service import Identity
from booking_ledger.services.identity_store import IdentityStore
from booking_ledger.services.pricing import PricingStrategy

logger = get_logger(__name__)

CODE_PREFIX = "SW"
CODE_ALPHABET = string.ascii_uppercase + string.digits
MAX_CODE_ATTEMPTS = 20


SORT_KEYS: dict[str, Callable[[Booking], Any]] = {
    "createdAt": lambda booking: booking.created_at.timestamp(),
    "startDate": lambda booking: booking.start_date,
    "totalPrice": lambda booking: booking.total_price,
}


def random_code(length: int) -> str:
    return CODE_PREFIX + "".join(secrets.choice(CODE_ALPHABET) for _ in range(length))


def _matches(booking: Booking, term: str) -> bool:
    fields = (booking.full_name, booking.email, booking.confirmation_code, booking.id)
    return any(value and term in value.lower() for value in fields)


class BookingLedger:
    def __init__(
        self,
        store: JsonFileStore,
        identities: IdentityStore,
        pricing: PricingStrategy,
        auto_confirm: bool = False,
        code_length: int = 6,
        code_generator: Callable[[int], str] = random_code,
    ):
        self.store = store
        self.identities = identities
        self.pricing = pricing
        self.auto_confirm = auto_confirm
        self.code_length = code_length
        self._generate_code = code_generator

        self._bookings: list[Booking] = []
        self._index: dict[str, int] = {}
        self._codes: set[str] = set()
        self._lock = asyncio.Lock()

    def load(self, records: Iterable[dict[str, Any]]) -> None:
        """Replace the in-memory collection with persisted records."""
        try:
            bookings = [Booking.from_record(record) for record in records]
        except PydanticValidationError as e:
            raise PersistenceError(f"Stored bookings are corrupt: {e.error_count()} invalid field(s)") from e

        self._bookings = bookings
        self._index = {booking.id: position for position, booking in enumerate(bookings)}
        self._codes = {b.confirmation_code for b in bookings if b.confirmation_code}
        logger.info("ledger_loaded", bookings=len(bookings))

    async def create(
        self,
        owner_id: str,
        payload: Union[BookingCreate, Mapping[str, Any]],
        timeout: Optional[float] = None,
    ) -> Booking:
        """
        Create a booking for `owner_id`.

        Raises ValidationError, UnknownOwner, PersistenceError or Timeout.
        Every call creates a new booking; create is not idempotent.
        """
        try:
            data = self._validate(payload)
            if self.identities.find_by_id(owner_id) is None:
                raise UnknownOwner(f"User {owner_id} does not exist")
            total_price = self.pricing.quote(data)
        except LedgerError:
            record_booking_operation("create", "rejected")
            raise

        async with self._lock:
            now = utcnow()
            booking = Booking(
                id=str(uuid4()),
                user_id=owner_id,
                status=BookingStatus.PENDING,
                total_price=total_price,
                created_at=now,
                **data.model_dump(exclude_none=True),
            )
            if self.auto_confirm:
                booking = booking.model_copy(update={
                    "status": BookingStatus.CONFIRMED,
                    "confirmation_code": self._new_code(),
                    "confirmed_at": now,
                })

            snapshot = [*self._bookings, booking]
            await self._persist(snapshot, "create", timeout)

            self._bookings = snapshot
            self._index[booking.id] = len(snapshot) - 1
            if booking.confirmation_code:
                self._codes.add(booking.confirmation_code)

        record_booking_operation("create", "success")
        logger.info(
            "booking_created",
            booking_id=booking.id,
            user_id=owner_id,
            trip_id=booking.trip_id,
            travelers=booking.travelers,
            status=booking.status.value,
            total_price=booking.total_price,
        )
        return booking

    def list_by_owner(self, owner_id: str, status: Optional[BookingStatus] = None) -> list[Booking]:
        """All bookings of one owner, in creation order."""
        return [
            booking for booking in self._bookings
            if booking.user_id == owner_id and (status is None or booking.status == status)
        ]

    def list_all(
        self,
        status: Optional[BookingStatus] = None,
        start_from: Optional[date] = None,
        start_to: Optional[date] = None,
        search: Optional[str] = None,
        sort_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> list[Booking]:
        """
        Every booking in the ledger, for back-office views.

        start_from/start_to bound startDate inclusively. search is a
        case-insensitive substring match on full name, email, confirmation
        code or id. Without sort_by the stored (creation) order is kept.
        """
        if sort_by is not None and sort_by not in SORT_KEYS:
            raise ValidationError(f"Cannot sort by {sort_by}", field="sortBy")
        if limit is not None and limit < 0:
            raise ValidationError("limit must not be negative", field="limit")

        bookings = [
            booking for booking in self._bookings
            if (status is None or booking.status == status)
            and (start_from is None or booking.start_date >= start_from)
            and (start_to is None or booking.start_date <= start_to)
            and (not search or _matches(booking, search.lower()))
        ]
        if sort_by is not None:
            bookings.sort(key=SORT_KEYS[sort_by], reverse=descending)
        if limit is not None:
            bookings = bookings[:limit]
        return bookings

    def get(self, booking_id: str, caller: Identity) -> Booking:
        booking = self._require(booking_id)
        self._authorize(booking, caller)
        return booking

    async def confirm(self, booking_id: str, caller: Identity, timeout: Optional[float] = None) -> Booking:
        """Move a pending booking to confirmed and assign its confirmation code."""
        async with self._lock:
            booking = self._require(booking_id)
            self._authorize(booking, caller)

            if booking.status != BookingStatus.PENDING:
                record_booking_operation("confirm", "rejected")
                raise InvalidTransition(f"Cannot confirm a {booking.status.value} booking")

            now = utcnow()
            updated = booking.model_copy(update={
                "status": BookingStatus.CONFIRMED,
                "confirmation_code": self._new_code(),
                "confirmed_at": now,
                "updated_at": now,
            })
            await self._replace(updated, "confirm", timeout)
            self._codes.add(updated.confirmation_code)

        record_booking_operation("confirm", "success")
        logger.info(
            "booking_confirmed",
            booking_id=updated.id,
            confirmation_code=updated.confirmation_code,
        )
        return updated

    async def cancel(self, booking_id: str, caller: Identity, timeout: Optional[float] = None) -> Booking:
        """
        Cancel a booking. Only the owner or an admin may cancel.
        Raises NotFound, Forbidden, InvalidTransition (already cancelled).
        """
        async with self._lock:
            booking = self._require(booking_id)
            self._authorize(booking, caller)

            if booking.status == BookingStatus.CANCELLED:
                record_booking_operation("cancel", "rejected")
                raise InvalidTransition("Booking is already cancelled")

            updated = booking.model_copy(update={
                "status": BookingStatus.CANCELLED,
                "updated_at": utcnow(),
            })
            await self._replace(updated, "cancel", timeout)

        record_booking_operation("cancel", "success")
        logger.info(
            "booking_cancelled",
            booking_id=updated.id,
            user_id=updated.user_id,
            cancelled_by=caller.user_id,
        )
        return updated

    def __len__(self) -> int:
        return len(self._bookings)

    def _validate(self, payload: Union[BookingCreate, Mapping[str, Any]]) -> BookingCreate:
        if isinstance(payload, BookingCreate):
            return payload
        try:
            return BookingCreate.model_validate(payload)
        except PydanticValidationError as e:
            first = e.errors()[0]
            location = ".".join(str(part) for part in first["loc"]) or "payload"
            raise ValidationError(f"{location}: {first['msg']}", errors=e.errors()) from e

    def _require(self, booking_id: str) -> Booking:
        position = self._index.get(booking_id)
        if position is None:
            raise NotFound(f"Booking {booking_id} not found")
        return self._bookings[position]

    def _authorize(self, booking: Booking, caller: Identity) -> None:
        if booking.user_id != caller.user_id and not caller.is_admin:
            logger.warning("booking_access_denied", booking_id=booking.id, caller_id=caller.user_id)
            raise Forbidden("You do not have access to this booking")

    def _new_code(self) -> str:
        for _ in range(MAX_CODE_ATTEMPTS):
            code = self._generate_code(self.code_length)
            if code not in self._codes:
                return code
            logger.info("confirmation_code_collision", code=code)
        raise LedgerError("Could not allocate a unique confirmation code")

    async def _replace(self, updated: Booking, operation: str, timeout: Optional[float]) -> None:
        position = self._index[updated.id]
        snapshot = list(self._bookings)
        snapshot[position] = updated
        await self._persist(snapshot, operation, timeout)
        self._bookings = snapshot

    async def _persist(self, snapshot: list[Booking], operation: str, timeout: Optional[float]) -> None:
        try:
            await self.store.flush(
                {"bookings": [booking.to_record() for booking in snapshot]},
                timeout=timeout,
            )
        except LedgerError:
            record_booking_operation(operation, "error")
            raise
