"""
Ownership guard.

A caller may only see or act on accounts it owns. A missing
account and someone else's account produce the same
ForbiddenError, so non-owners learn nothing about which
account ids exist.
"""

from banking_api.errors import ForbiddenError
from banking_api.logging_config import get_logger
from banking_api.models.account import Account
from banking_api.models.base import StoreClient
from banking_api.stores.account_store import AccountStore

logger = get_logger(__name__)


class OwnershipGuard:

    def __init__(self, store: StoreClient):
        self.store = store

    def assert_ownership(self, account_id: str, caller_user_id: str) -> Account:
        """Return the account if the caller owns it, else raise ForbiddenError."""
        with self.store.unit_of_work() as db:
            account = AccountStore(db).get(account_id)

        if account is None:
            raise ForbiddenError("Account not found or access denied")

        if account.user_id != caller_user_id:
            logger.warning(
                "Access to foreign account denied",
                extra={"context": {"account_id": account_id, "user_id": caller_user_id}},
            )
            raise ForbiddenError("You do not have access to this account")

        return account
