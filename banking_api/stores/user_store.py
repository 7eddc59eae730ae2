"""
Credential store: user records.

Pure data access. Email lookups are case-insensitive because
emails are normalised to lower-case before they are stored.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from banking_api.models.user import User
from banking_api.models.enums import UserRole


def normalize_email(email: str) -> str:
    return email.strip().lower()


class UserStore:

    def __init__(self, db: Session):
        self.db = db

    def create(
        self,
        email: str,
        password_hash: str,
        role: UserRole = UserRole.CUSTOMER,
    ) -> User:
        user = User(
            email=normalize_email(email),
            password_hash=password_hash,
            role=role,
        )
        self.db.add(user)
        self.db.flush()
        return user

    def get(self, user_id: str) -> User | None:
        return self.db.get(User, user_id)

    def get_by_email(self, email: str) -> User | None:
        return self.db.execute(
            select(User).where(User.email == normalize_email(email))
        ).scalar_one_or_none()
