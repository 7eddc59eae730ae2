"""
Account store: account records and the conditional balance write.

compare_and_set_balance() is the only way a balance changes.
It writes only if the stored balance still equals the value the
caller read, and reports whether it did.
"""

from decimal import Decimal

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from banking_api.models.account import Account


class AccountStore:

    def __init__(self, db: Session):
        self.db = db

    def create(
        self,
        account_id: str,
        user_id: str,
        customer_name: str,
        balance: Decimal,
    ) -> Account:
        account = Account(
            account_id=account_id,
            user_id=user_id,
            customer_name=customer_name,
            balance=balance,
        )
        self.db.add(account)
        self.db.flush()
        return account

    def get(self, account_id: str) -> Account | None:
        return self.db.get(Account, account_id)

    def exists(self, account_id: str) -> bool:
        return self.db.execute(
            select(Account.account_id).where(Account.account_id == account_id)
        ).first() is not None

    def list_by_user(self, user_id: str) -> list[Account]:
        accounts = self.db.execute(
            select(Account)
            .where(Account.user_id == user_id)
            .order_by(Account.created_at, Account.account_id)
        ).scalars().all()
        return list(accounts)

    def compare_and_set_balance(
        self, account_id: str, expected: Decimal, new_balance: Decimal
    ) -> bool:
        """
        Set the balance only if it still equals `expected`.

        Returns False when another writer changed the balance
        after it was read; nothing is written in that case.
        """
        result = self.db.execute(
            update(Account)
            .where(
                Account.account_id == account_id,
                Account.balance == expected,
            )
            .values(balance=new_balance)
        )
        return result.rowcount == 1
