"""
Authentication endpoints: login, logout and current identity.
"""

from fastapi import APIRouter, Depends, status

from booking_ledger.api.deps import get_auth_gate, get_bearer_token, get_current_identity, get_services
from booking_ledger.schemas.user import UserLogin, UserResponse, Token
from booking_ledger.services.auth_service import AuthGate, Identity
from booking_ledger.services.registry import ServiceRegistry

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/login", response_model=Token)
async def login(login_data: UserLogin, auth: AuthGate = Depends(get_auth_gate)):
    """Authenticate and receive an opaque session token."""
    token, user = await auth.login(login_data.email, login_data.password)
    return Token(
        access_token=token,
        expires_in=auth.ttl_seconds,
        user=UserResponse.model_validate(user),
    )


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    token: str = Depends(get_bearer_token),
    identity: Identity = Depends(get_current_identity),
    auth: AuthGate = Depends(get_auth_gate),
):
    """Revoke the current session."""
    await auth.logout(token)


@router.get("/me", response_model=UserResponse)
async def me(
    identity: Identity = Depends(get_current_identity),
    services: ServiceRegistry = Depends(get_services),
):
    return services.identities.find_by_id(identity.user_id)
