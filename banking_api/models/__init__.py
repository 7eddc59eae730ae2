"""
Database models package.

All models must be imported here so that Base.metadata knows
every table before create_all() runs.
"""

from banking_api.models.base import Base, StoreClient, get_store
from banking_api.models.enums import UserRole, TransactionType
from banking_api.models.user import User
from banking_api.models.account import Account
from banking_api.models.transaction import Transaction
from banking_api.models.refresh_token import RefreshToken

__all__ = [
    "Base",
    "StoreClient",
    "get_store",
    "UserRole",
    "TransactionType",
    "User",
    "Account",
    "Transaction",
    "RefreshToken",
]
