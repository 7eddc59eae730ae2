"""
Transaction model.

One row per balance change on one account. Rows are
append-only: written once, never updated or deleted. Replaying
an account's rows reproduces its balance.
"""

from decimal import Decimal

from sqlalchemy import String, BigInteger, Numeric, Index, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from banking_api.models.base import Base
from banking_api.models.enums import TransactionType


class Transaction(Base):
    """
    A signed change to an account balance.

    Credits carry a positive amount, debits a negative one.
    new_balance is the account balance right after this row.
    Both rows of a transfer share one timestamp and reference.
    """

    __tablename__ = "transactions"
    __table_args__ = (
        Index("ix_transactions_account_timestamp", "account_id", "timestamp"),
    )

    # Tie-breaker for rows written in the same millisecond
    id: Mapped[int] = mapped_column(primary_key=True)
    account_id: Mapped[str] = mapped_column(String(64), nullable=False)
    # Epoch milliseconds
    timestamp: Mapped[int] = mapped_column(BigInteger, nullable=False)
    amount: Mapped[Decimal] = mapped_column(Numeric(19, 4), nullable=False)
    transaction_type: Mapped[TransactionType] = mapped_column(
        SAEnum(
            TransactionType,
            name="transaction_type_enum",
            create_constraint=True,
        ),
        nullable=False,
    )
    new_balance: Mapped[Decimal] = mapped_column(Numeric(19, 4), nullable=False)
    to_account_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    from_account_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    reference: Mapped[str | None] = mapped_column(String(36), nullable=True)

    def __repr__(self) -> str:
        return (
            f"<Transaction {self.transaction_type.value} "
            f"{self.account_id} {self.amount}>"
        )
