"""
Authentication endpoints: register, login, refresh, logout.
"""

from fastapi import APIRouter, Depends

from banking_api.api.deps import get_auth_service, get_current_identity
from banking_api.schemas.auth import (
    RegisterRequest,
    RegisterResponse,
    LoginRequest,
    LoginResponse,
    RefreshRequest,
    RefreshResponse,
    LogoutResponse,
)
from banking_api.services.auth_service import AuthService
from banking_api.services.token_service import Identity

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post("/register", response_model=RegisterResponse, status_code=201)
def register(
    request: RegisterRequest,
    service: AuthService = Depends(get_auth_service),
):
    """Register a new customer."""
    user = service.register(request.email, request.password)
    return RegisterResponse(user_id=user.user_id)


@router.post("/login", response_model=LoginResponse)
def login(
    request: LoginRequest,
    service: AuthService = Depends(get_auth_service),
):
    """Exchange credentials for an access token and a refresh token."""
    pair = service.login(request.email, request.password)
    return LoginResponse(
        access_token=pair.access_token,
        refresh_token=pair.refresh_token,
        expires_in=pair.expires_in,
    )


@router.post("/refresh", response_model=RefreshResponse)
def refresh(
    request: RefreshRequest,
    service: AuthService = Depends(get_auth_service),
):
    """Exchange a registered refresh token for a new access token."""
    access_token = service.refresh(request.refresh_token)
    return RefreshResponse(
        access_token=access_token,
        expires_in=service.access_expires_in,
    )


@router.post("/logout", response_model=LogoutResponse)
def logout(
    identity: Identity = Depends(get_current_identity),
    service: AuthService = Depends(get_auth_service),
):
    """Revoke every refresh token of the caller."""
    revoked = service.logout(identity.user_id)
    return LogoutResponse(tokens_revoked=revoked)
