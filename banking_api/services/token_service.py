"""
Token service: signs and verifies bearer tokens.

Two kinds of token share one secret and are told apart only by
their payload: access tokens carry {userId, role}, refresh
tokens carry {userId, type: "refresh"}. The service is
stateless; whether a refresh token is still registered is the
auth service's concern.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import lru_cache

import jwt

from banking_api.config import get_settings
from banking_api.errors import UnauthorizedError, TokenExpiredError
from banking_api.models.enums import UserRole

REFRESH_TOKEN_TYPE = "refresh"


@dataclass(frozen=True)
class Identity:
    """The caller, as proven by a verified access token."""
    user_id: str
    role: str = UserRole.CUSTOMER.value


class TokenService:

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        access_ttl: timedelta = timedelta(minutes=15),
        refresh_ttl: timedelta = timedelta(hours=1),
    ):
        if not secret:
            raise RuntimeError("A token signing secret is required")
        self.secret = secret
        self.algorithm = algorithm
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl

    def _sign(self, claims: dict, ttl: timedelta) -> str:
        now = datetime.now(timezone.utc)
        payload = {**claims, "iat": now, "exp": now + ttl}
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def issue_access_token(self, user_id: str, role: str) -> str:
        return self._sign({"userId": user_id, "role": role}, self.access_ttl)

    def issue_refresh_token(self, user_id: str) -> str:
        # jti keeps two tokens issued in the same second distinct
        return self._sign(
            {
                "userId": user_id,
                "type": REFRESH_TOKEN_TYPE,
                "jti": uuid.uuid4().hex,
            },
            self.refresh_ttl,
        )

    def verify(self, token: str) -> dict:
        """
        Check signature and expiry and return the payload.

        Raises TokenExpiredError for an expired token and
        UnauthorizedError for anything else that fails.
        """
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                options={"require": ["exp"]},
            )
        except jwt.ExpiredSignatureError:
            raise TokenExpiredError("Token has expired")
        except jwt.InvalidTokenError:
            raise UnauthorizedError("Invalid token")

        if not payload.get("userId"):
            raise UnauthorizedError("Invalid token")
        return payload

    def verify_access_token(self, token: str) -> Identity:
        payload = self.verify(token)
        if payload.get("type") == REFRESH_TOKEN_TYPE:
            raise UnauthorizedError("Cannot use refresh token for API access")
        return Identity(
            user_id=payload["userId"],
            role=payload.get("role") or UserRole.CUSTOMER.value,
        )

    def verify_refresh_token(self, token: str) -> dict:
        try:
            payload = self.verify(token)
        except TokenExpiredError:
            raise TokenExpiredError("Refresh token has expired")
        except UnauthorizedError:
            raise UnauthorizedError("Invalid refresh token")

        if payload.get("type") != REFRESH_TOKEN_TYPE:
            raise UnauthorizedError("Invalid token type")
        return payload


@lru_cache()
def get_token_service() -> TokenService:
    settings = get_settings()
    return TokenService(
        secret=settings.JWT_SECRET,
        algorithm=settings.JWT_ALGORITHM,
        access_ttl=timedelta(seconds=settings.ACCESS_TOKEN_EXPIRE_SECONDS),
        refresh_ttl=timedelta(seconds=settings.REFRESH_TOKEN_EXPIRE_SECONDS),
    )
