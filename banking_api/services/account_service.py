"""
Account service: opening and listing accounts.

Opening an account writes the account row and, for a positive
opening balance, its initial_deposit row in the same unit of
work, so the log always explains the balance.
"""

from decimal import Decimal

from sqlalchemy.exc import IntegrityError

from banking_api.errors import ConflictError, ValidationError
from banking_api.logging_config import get_logger
from banking_api.models.account import Account
from banking_api.models.base import StoreClient
from banking_api.models.enums import TransactionType
from banking_api.models.transaction import Transaction
from banking_api.services.ledger_service import now_ms, to_amount
from banking_api.stores.account_store import AccountStore
from banking_api.stores.transaction_log import TransactionLog

logger = get_logger(__name__)


class AccountService:

    def __init__(self, store: StoreClient):
        self.store = store

    def create_account(
        self,
        user_id: str,
        account_id: str,
        customer_name: str,
        initial_balance=Decimal("0"),
    ) -> Account:
        if not account_id or not account_id.strip():
            raise ValidationError("Account ID is required")
        if not customer_name or not customer_name.strip():
            raise ValidationError("Customer name is required")

        initial_balance = to_amount(initial_balance)
        if initial_balance < 0:
            raise ValidationError("Initial balance cannot be negative")

        try:
            with self.store.unit_of_work() as db:
                accounts = AccountStore(db)
                if accounts.exists(account_id):
                    raise ConflictError("Account already exists")

                account = accounts.create(
                    account_id=account_id,
                    user_id=user_id,
                    customer_name=customer_name,
                    balance=initial_balance,
                )
                if initial_balance > 0:
                    TransactionLog(db).append(Transaction(
                        account_id=account_id,
                        timestamp=now_ms(),
                        amount=initial_balance,
                        transaction_type=TransactionType.INITIAL_DEPOSIT,
                        new_balance=initial_balance,
                    ))
        except IntegrityError:
            raise ConflictError("Account already exists")

        logger.info(
            "Account created",
            extra={"context": {
                "account_id": account_id,
                "user_id": user_id,
                "initial_balance": initial_balance,
            }},
        )
        return account

    def list_accounts(self, user_id: str) -> list[Account]:
        with self.store.unit_of_work() as db:
            return AccountStore(db).list_by_user(user_id)
