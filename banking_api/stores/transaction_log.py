"""
Transaction log: append-only per-account history.

Rows are never updated or deleted.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from banking_api.models.transaction import Transaction


class TransactionLog:

    def __init__(self, db: Session):
        self.db = db

    def append(self, entry: Transaction) -> Transaction:
        self.db.add(entry)
        self.db.flush()
        return entry

    def list_by_account(
        self, account_id: str, limit: int | None = None
    ) -> list[Transaction]:
        """Return an account's rows, newest first."""
        query = (
            select(Transaction)
            .where(Transaction.account_id == account_id)
            .order_by(Transaction.timestamp.desc(), Transaction.id.desc())
        )
        if limit is not None:
            query = query.limit(limit)
        return list(self.db.execute(query).scalars().all())

    def list_by_reference(self, reference: str) -> list[Transaction]:
        """Return every row written by one transfer, in write order."""
        entries = self.db.execute(
            select(Transaction)
            .where(Transaction.reference == reference)
            .order_by(Transaction.id)
        ).scalars().all()
        return list(entries)
