"""
Ledger service: deposits, withdrawals, and transfers.

This service enforces the fundamental rules:
1. A balance is never negative
2. Every balance change is recorded by exactly one log row,
   written in the same unit of work as the change
3. Balances change only through a conditional write on the
   balance last read (optimistic concurrency)

A leg is one account's read, conditional write and log row.
If the conditional write loses to another writer, or the store
reports a transient OperationalError, the leg is retried from a
fresh read with exponential backoff. When the retry budget runs
out the operation fails (ConcurrentModificationError for lost
writes, the last store error otherwise) and nothing has been
written. Each attempt stamps its row with a fresh clock reading.

A transfer is two legs. Once the source is debited, the
destination credit is retried with a larger budget. If it still
cannot be applied, the debit is reversed with a
transfer_reversal row. If even the reversal fails, the transfer
is reported as TransferIncompleteError carrying everything
needed to reconcile it by hand.

Ownership is not checked here; callers go through the
OwnershipGuard first.
"""

import time
import uuid
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Callable

from sqlalchemy.exc import OperationalError, SQLAlchemyError

from banking_api.config import get_settings
from banking_api.errors import (
    BankingError,
    ConcurrentModificationError,
    NotFoundError,
    TransferIncompleteError,
    ValidationError,
)
from banking_api.logging_config import get_logger
from banking_api.models.base import StoreClient
from banking_api.models.enums import TransactionType
from banking_api.models.transaction import Transaction
from banking_api.stores.account_store import AccountStore
from banking_api.stores.transaction_log import TransactionLog

logger = get_logger(__name__)


def now_ms() -> int:
    return int(time.time() * 1000)


def to_amount(value) -> Decimal:
    """Convert user input to a finite Decimal, or raise ValidationError."""
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError("Amount must be a number")
    if not amount.is_finite():
        raise ValidationError("Amount must be a finite number")
    return amount


def validate_amount(value) -> Decimal:
    """Return the amount if it is strictly positive."""
    amount = to_amount(value)
    if amount < 0:
        raise ValidationError("Amount cannot be negative")
    if amount == 0:
        raise ValidationError("Amount must be greater than zero")
    return amount


class _ConditionalWriteLost(Exception):
    """The balance changed between read and conditional write."""


@dataclass(frozen=True)
class TransferReceipt:
    reference: str
    timestamp: int
    amount: Decimal
    source_entry: Transaction
    destination_entry: Transaction

    @property
    def source_new_balance(self) -> Decimal:
        return self.source_entry.new_balance


class LedgerService:
    """
    All balance changes pass through this service.

    The service takes the process-wide StoreClient and opens one
    unit of work per leg attempt, so every attempt reads fresh
    state.
    """

    def __init__(
        self,
        store: StoreClient,
        max_retries: int | None = None,
        credit_max_retries: int | None = None,
        backoff_seconds: float | None = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], int] = now_ms,
    ):
        settings = get_settings()
        self.store = store
        self.max_retries = (
            settings.LEDGER_MAX_RETRIES if max_retries is None else max_retries
        )
        self.credit_max_retries = (
            settings.TRANSFER_CREDIT_MAX_RETRIES
            if credit_max_retries is None else credit_max_retries
        )
        self.backoff_seconds = (
            settings.LEDGER_RETRY_BACKOFF_SECONDS
            if backoff_seconds is None else backoff_seconds
        )
        self.sleep = sleep
        self.clock = clock

    # --- Internals ---

    def _backoff(self, attempt: int) -> None:
        if self.backoff_seconds > 0:
            self.sleep(self.backoff_seconds * (2 ** (attempt - 1)))

    def _apply_leg(
        self,
        account_id: str,
        delta: Decimal,
        build_entry: Callable[[Decimal, int], Transaction],
        max_retries: int,
        missing_message: str = "Account not found",
    ) -> Transaction:
        """
        Add `delta` to one account's balance and append its log row.

        Each attempt is one unit of work: read the balance, check
        it stays non-negative, write conditionally on the value
        read, append the row. A lost conditional write or an
        OperationalError rolls the attempt back and starts over
        from a fresh read.

        `build_entry` receives the new balance and the attempt's
        timestamp.
        """
        store_error = None
        for attempt in range(1, max_retries + 1):
            try:
                with self.store.unit_of_work() as db:
                    timestamp = self.clock()
                    accounts = AccountStore(db)
                    account = accounts.get(account_id)
                    if account is None:
                        raise NotFoundError(missing_message)

                    new_balance = account.balance + delta
                    if new_balance < 0:
                        raise ValidationError("Insufficient funds")

                    if not accounts.compare_and_set_balance(
                        account_id, account.balance, new_balance
                    ):
                        raise _ConditionalWriteLost()

                    entry = TransactionLog(db).append(
                        build_entry(new_balance, timestamp)
                    )
                return entry
            except _ConditionalWriteLost:
                store_error = None
                logger.debug(
                    "Balance changed concurrently, retrying",
                    extra={"context": {"account_id": account_id, "attempt": attempt}},
                )
            except OperationalError as exc:
                store_error = exc
                logger.warning(
                    "Store error, retrying",
                    exc_info=True,
                    extra={"context": {"account_id": account_id, "attempt": attempt}},
                )
            if attempt < max_retries:
                self._backoff(attempt)

        if store_error is not None:
            raise store_error

        logger.warning(
            "Gave up after repeated concurrent modifications",
            extra={"context": {"account_id": account_id, "attempts": max_retries}},
        )
        raise ConcurrentModificationError(
            "Account was modified concurrently, please retry",
            details={"account_id": account_id},
        )

    # --- Operations ---

    def deposit(self, account_id: str, amount) -> Transaction:
        """Credit an account. Returns the deposit row."""
        amount = validate_amount(amount)

        entry = self._apply_leg(
            account_id,
            amount,
            lambda new_balance, timestamp: Transaction(
                account_id=account_id,
                timestamp=timestamp,
                amount=amount,
                transaction_type=TransactionType.DEPOSIT,
                new_balance=new_balance,
            ),
            self.max_retries,
        )

        logger.info(
            "Deposit successful",
            extra={"context": {
                "account_id": account_id,
                "amount": amount,
                "new_balance": entry.new_balance,
            }},
        )
        return entry

    def withdraw(self, account_id: str, amount) -> Transaction:
        """
        Debit an account. Returns the withdrawal row.

        Raises ValidationError("Insufficient funds") before
        anything is written if the balance would go negative.
        """
        amount = validate_amount(amount)

        entry = self._apply_leg(
            account_id,
            -amount,
            lambda new_balance, timestamp: Transaction(
                account_id=account_id,
                timestamp=timestamp,
                amount=-amount,
                transaction_type=TransactionType.WITHDRAWAL,
                new_balance=new_balance,
            ),
            self.max_retries,
        )

        logger.info(
            "Withdrawal successful",
            extra={"context": {
                "account_id": account_id,
                "amount": amount,
                "new_balance": entry.new_balance,
            }},
        )
        return entry

    def transfer(
        self, from_account_id: str, to_account_id: str, amount
    ) -> TransferReceipt:
        """
        Move money from one account to another.

        The destination only has to exist; the caller must
        already have been checked as owner of the source. Both
        rows share one reference and the timestamp of the debit.
        """
        amount = validate_amount(amount)
        if not to_account_id:
            raise ValidationError("Destination account ID is required")
        if from_account_id == to_account_id:
            raise ValidationError("Cannot transfer to the same account")

        with self.store.unit_of_work() as db:
            if not AccountStore(db).exists(to_account_id):
                raise NotFoundError("Destination account not found")

        reference = str(uuid.uuid4())
        context = {
            "reference": reference,
            "from_account_id": from_account_id,
            "to_account_id": to_account_id,
            "amount": amount,
        }

        source_entry = self._apply_leg(
            from_account_id,
            -amount,
            lambda new_balance, timestamp: Transaction(
                account_id=from_account_id,
                timestamp=timestamp,
                amount=-amount,
                transaction_type=TransactionType.TRANSFER_OUT,
                new_balance=new_balance,
                to_account_id=to_account_id,
                reference=reference,
            ),
            self.max_retries,
        )

        # From here on the source is debited. Never return
        # without crediting the destination or undoing the debit.
        try:
            destination_entry = self._apply_leg(
                to_account_id,
                amount,
                lambda new_balance, _: Transaction(
                    account_id=to_account_id,
                    timestamp=source_entry.timestamp,
                    amount=amount,
                    transaction_type=TransactionType.TRANSFER_IN,
                    new_balance=new_balance,
                    from_account_id=from_account_id,
                    reference=reference,
                ),
                self.credit_max_retries,
                missing_message="Destination account not found",
            )
        except (BankingError, SQLAlchemyError) as credit_error:
            logger.error(
                "Transfer credit failed after debit, reversing",
                exc_info=True,
                extra={"context": context},
            )
            self._reverse_debit(from_account_id, to_account_id, amount, reference, credit_error)

        logger.info(
            "Transfer successful",
            extra={"context": {
                **context,
                "source_new_balance": source_entry.new_balance,
            }},
        )
        return TransferReceipt(
            reference=reference,
            timestamp=source_entry.timestamp,
            amount=amount,
            source_entry=source_entry,
            destination_entry=destination_entry,
        )

    def _reverse_debit(
        self,
        from_account_id: str,
        to_account_id: str,
        amount: Decimal,
        reference: str,
        cause: Exception,
    ) -> None:
        """
        Undo the debit leg of a transfer whose credit failed.

        Always raises: ConcurrentModificationError once the money
        is back on the source, TransferIncompleteError if it could
        not be put back.
        """
        details = {
            "reference": reference,
            "from_account_id": from_account_id,
            "to_account_id": to_account_id,
            "amount": str(amount),
        }
        try:
            self._apply_leg(
                from_account_id,
                amount,
                lambda new_balance, timestamp: Transaction(
                    account_id=from_account_id,
                    timestamp=timestamp,
                    amount=amount,
                    transaction_type=TransactionType.TRANSFER_REVERSAL,
                    new_balance=new_balance,
                    to_account_id=to_account_id,
                    reference=reference,
                ),
                self.credit_max_retries,
            )
        except (BankingError, SQLAlchemyError) as reversal_error:
            logger.error(
                "Transfer left incomplete: source debited, destination not credited",
                exc_info=True,
                extra={"context": {**details, "state": "debited"}},
            )
            raise TransferIncompleteError(
                "Transfer could not be completed or reversed",
                details={**details, "state": "debited"},
            ) from reversal_error

        logger.warning(
            "Transfer reversed",
            extra={"context": {**details, "state": "reversed"}},
        )
        raise ConcurrentModificationError(
            "Transfer could not be completed and was reversed, please retry",
            details={**details, "state": "reversed"},
        ) from cause

    # --- Queries ---

    def get_transactions(
        self, account_id: str, limit: int | None = None
    ) -> list[Transaction]:
        """Return an account's log, newest first."""
        with self.store.unit_of_work() as db:
            return TransactionLog(db).list_by_account(account_id, limit=limit)

    def get_transfer_entries(self, reference: str) -> list[Transaction]:
        """Return every row a transfer wrote, for reconciliation."""
        with self.store.unit_of_work() as db:
            return TransactionLog(db).list_by_reference(reference)

    def get_balance(self, account_id: str) -> Decimal:
        with self.store.unit_of_work() as db:
            account = AccountStore(db).get(account_id)
        if account is None:
            raise NotFoundError("Account not found")
        return account.balance
