"""Data access for the four tables. Stores never commit."""

from banking_api.stores.user_store import UserStore
from banking_api.stores.account_store import AccountStore
from banking_api.stores.transaction_log import TransactionLog
from banking_api.stores.refresh_token_store import RefreshTokenStore

__all__ = ["UserStore", "AccountStore", "TransactionLog", "RefreshTokenStore"]
