"""
Request dependencies: service lookup and caller authentication.
"""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from booking_ledger.core.exceptions import Forbidden, Unauthenticated
from booking_ledger.services.auth_service import AuthGate, Identity
from booking_ledger.services.booking_service import BookingLedger
from booking_ledger.services.catalog_service import TripCatalog
from booking_ledger.services.favorites_service import FavoritesService
from booking_ledger.services.registry import ServiceRegistry

bearer_scheme = HTTPBearer(auto_error=False)


def get_services(request: Request) -> ServiceRegistry:
    return request.app.state.services


def get_auth_gate(services: ServiceRegistry = Depends(get_services)) -> AuthGate:
    return services.auth


def get_ledger(services: ServiceRegistry = Depends(get_services)) -> BookingLedger:
    return services.ledger


def get_catalog(services: ServiceRegistry = Depends(get_services)) -> TripCatalog:
    return services.catalog


def get_favorites(services: ServiceRegistry = Depends(get_services)) -> FavoritesService:
    return services.favorites


def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise Unauthenticated("No token provided")
    return credentials.credentials


async def get_current_identity(
    token: str = Depends(get_bearer_token),
    auth: AuthGate = Depends(get_auth_gate),
) -> Identity:
    return await auth.resolve(token)


async def require_admin(identity: Identity = Depends(get_current_identity)) -> Identity:
    if not identity.is_admin:
        raise Forbidden("Admin privileges required")
    return identity
