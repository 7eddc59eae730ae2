"""
FastAPI dependencies shared by the routers.

The store client and token service are process-wide
singletons; services are cheap wrappers built per request.
"""

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from banking_api.errors import UnauthorizedError
from banking_api.models.base import StoreClient, get_store
from banking_api.services.account_service import AccountService
from banking_api.services.auth_service import AuthService
from banking_api.services.ledger_service import LedgerService
from banking_api.services.ownership import OwnershipGuard
from banking_api.services.token_service import Identity, TokenService, get_token_service

bearer_scheme = HTTPBearer(auto_error=False)


def get_current_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    tokens: TokenService = Depends(get_token_service),
) -> Identity:
    """Resolve the caller from the Authorization: Bearer header."""
    if credentials is None:
        raise UnauthorizedError("Missing or malformed Authorization header")
    return tokens.verify_access_token(credentials.credentials)


def get_auth_service(
    store: StoreClient = Depends(get_store),
    tokens: TokenService = Depends(get_token_service),
) -> AuthService:
    return AuthService(store, tokens)


def get_account_service(store: StoreClient = Depends(get_store)) -> AccountService:
    return AccountService(store)


def get_ledger_service(store: StoreClient = Depends(get_store)) -> LedgerService:
    return LedgerService(store)


def get_ownership_guard(store: StoreClient = Depends(get_store)) -> OwnershipGuard:
    return OwnershipGuard(store)
