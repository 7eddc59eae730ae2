"""
Auth service: registration, login, refresh and logout.

Ties the credential store, the token service and the refresh
token registry together. A refresh token works only while it
is registered; logout removes every registered token of the
user, so all of their sessions end at once.
"""

import time
from dataclasses import dataclass

from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError

from banking_api.config import get_settings
from banking_api.errors import ConflictError, UnauthorizedError, TokenExpiredError
from banking_api.logging_config import get_logger
from banking_api.models.base import StoreClient
from banking_api.models.enums import UserRole
from banking_api.models.user import User
from banking_api.services.token_service import TokenService
from banking_api.stores.refresh_token_store import RefreshTokenStore
from banking_api.stores.user_store import UserStore

logger = get_logger(__name__)


def build_password_context(rounds: int | None = None) -> CryptContext:
    if rounds is None:
        rounds = get_settings().BCRYPT_ROUNDS
    return CryptContext(schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds)


@dataclass(frozen=True)
class TokenPair:
    access_token: str
    refresh_token: str
    expires_in: int


class AuthService:

    def __init__(
        self,
        store: StoreClient,
        tokens: TokenService,
        pwd_context: CryptContext | None = None,
    ):
        self.store = store
        self.tokens = tokens
        self.pwd_context = pwd_context or build_password_context()

    @property
    def access_expires_in(self) -> int:
        return int(self.tokens.access_ttl.total_seconds())

    def register(self, email: str, password: str) -> User:
        """
        Create a customer with a hashed password.

        Raises ConflictError if the email is already registered,
        in any letter case.
        """
        password_hash = self.pwd_context.hash(password)
        try:
            with self.store.unit_of_work() as db:
                users = UserStore(db)
                if users.get_by_email(email):
                    raise ConflictError("Email already registered")
                user = users.create(email, password_hash, UserRole.CUSTOMER)
        except IntegrityError:
            # Lost a race with another registration of the same email
            raise ConflictError("Email already registered")

        logger.info(
            "User registered",
            extra={"context": {"user_id": user.user_id}},
        )
        return user

    def login(self, email: str, password: str) -> TokenPair:
        with self.store.unit_of_work() as db:
            user = UserStore(db).get_by_email(email)

        if not user or not self.pwd_context.verify(password, user.password_hash):
            logger.info("Login rejected")
            raise UnauthorizedError("Invalid email or password")

        access_token = self.tokens.issue_access_token(user.user_id, user.role.value)
        refresh_token = self.tokens.issue_refresh_token(user.user_id)
        expires_at = int(time.time()) + int(self.tokens.refresh_ttl.total_seconds())

        with self.store.unit_of_work() as db:
            RefreshTokenStore(db).register(refresh_token, user.user_id, expires_at)

        logger.info("Login successful", extra={"context": {"user_id": user.user_id}})
        return TokenPair(
            access_token=access_token,
            refresh_token=refresh_token,
            expires_in=self.access_expires_in,
        )

    def refresh(self, refresh_token: str) -> str:
        """
        Exchange a registered refresh token for a new access token.

        Fails with UnauthorizedError if the token does not verify,
        is not registered (revoked), or is registered but past its
        expiry; an expired registration is deleted on the way out.
        """
        payload = self.tokens.verify_refresh_token(refresh_token)
        user_id = payload["userId"]

        with self.store.unit_of_work() as db:
            registry = RefreshTokenStore(db)
            record = registry.get(refresh_token)
            expired = record is not None and record.is_expired(int(time.time()))
            if expired:
                registry.revoke(refresh_token)

        if record is None:
            logger.info(
                "Refresh rejected: token revoked",
                extra={"context": {"user_id": user_id}},
            )
            raise UnauthorizedError("Refresh token has been revoked")
        if expired:
            logger.info(
                "Refresh rejected: token expired",
                extra={"context": {"user_id": user_id}},
            )
            raise TokenExpiredError("Refresh token has expired")

        with self.store.unit_of_work() as db:
            user = UserStore(db).get(user_id)
        role = user.role.value if user else UserRole.CUSTOMER.value

        logger.info("Token refreshed", extra={"context": {"user_id": user_id}})
        return self.tokens.issue_access_token(user_id, role)

    def logout(self, user_id: str) -> int:
        """Revoke every refresh token of the user. Returns the count."""
        with self.store.unit_of_work() as db:
            revoked = RefreshTokenStore(db).revoke_all_for_user(user_id)

        logger.info(
            "Logout successful",
            extra={"context": {"user_id": user_id, "tokens_revoked": revoked}},
        )
        return revoked
