"""Business logic services."""

from banking_api.services.token_service import TokenService, Identity, get_token_service
from banking_api.services.auth_service import AuthService, TokenPair
from banking_api.services.ownership import OwnershipGuard
from banking_api.services.ledger_service import LedgerService, TransferReceipt
from banking_api.services.account_service import AccountService

__all__ = [
    "TokenService",
    "Identity",
    "get_token_service",
    "AuthService",
    "TokenPair",
    "OwnershipGuard",
    "LedgerService",
    "TransferReceipt",
    "AccountService",
]
