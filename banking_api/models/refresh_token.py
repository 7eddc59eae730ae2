"""
Refresh token model.

A refresh token is usable only while its row exists. Deleting
the row revokes the token even though its signature still
verifies.
"""

from datetime import datetime

from sqlalchemy import String, DateTime, Integer
from sqlalchemy.orm import Mapped, mapped_column

from banking_api.models.base import Base


class RefreshToken(Base):
    __tablename__ = "refresh_tokens"

    token: Mapped[str] = mapped_column(String(1024), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    # Epoch seconds
    expires_at: Mapped[int] = mapped_column(Integer, nullable=False)

    def is_expired(self, now: int) -> bool:
        return self.expires_at < now

    def __repr__(self) -> str:
        return f"<RefreshToken user={self.user_id} expires_at={self.expires_at}>"
