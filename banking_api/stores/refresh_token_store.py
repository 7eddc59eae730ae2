"""
Refresh token registry.

A refresh token is active only while it is registered here.
"""

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from banking_api.models.refresh_token import RefreshToken


class RefreshTokenStore:

    def __init__(self, db: Session):
        self.db = db

    def register(self, token: str, user_id: str, expires_at: int) -> RefreshToken:
        record = RefreshToken(token=token, user_id=user_id, expires_at=expires_at)
        self.db.add(record)
        self.db.flush()
        return record

    def get(self, token: str) -> RefreshToken | None:
        return self.db.get(RefreshToken, token)

    def is_active(self, token: str) -> str | None:
        """Return the owning user id, or None if revoked or unknown."""
        record = self.get(token)
        return record.user_id if record else None

    def revoke(self, token: str) -> bool:
        result = self.db.execute(
            delete(RefreshToken).where(RefreshToken.token == token)
        )
        return result.rowcount > 0

    def revoke_all_for_user(self, user_id: str) -> int:
        """Revoke every session of the user. Returns how many were revoked."""
        result = self.db.execute(
            delete(RefreshToken).where(RefreshToken.user_id == user_id)
        )
        return result.rowcount

    def list_for_user(self, user_id: str) -> list[RefreshToken]:
        records = self.db.execute(
            select(RefreshToken).where(RefreshToken.user_id == user_id)
        ).scalars().all()
        return list(records)
