"""
Shared test fixtures.

Sets up an isolated SQLite database file per test so tests
never touch a real database, and overrides the app's store
dependency to use it.
"""

import os

# Settings are read at import time, so these must be set first.
os.environ.setdefault("JWT_SECRET", "test-secret-with-at-least-32-bytes!!")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("AUTO_CREATE_TABLES", "false")
os.environ.setdefault("LEDGER_RETRY_BACKOFF_SECONDS", "0")

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from banking_api.main import app
from banking_api.models.base import StoreClient, get_store
from banking_api.services.account_service import AccountService
from banking_api.services.auth_service import AuthService, build_password_context
from banking_api.services.ledger_service import LedgerService
from banking_api.services.token_service import get_token_service


@pytest.fixture
def store(tmp_path):
    """A StoreClient over a fresh SQLite file with all tables created."""
    client = StoreClient.from_url(f"sqlite:///{tmp_path / 'test.db'}")
    client.create_tables()
    yield client
    client.drop_tables()
    client.dispose()


@pytest.fixture
def tokens():
    return get_token_service()


@pytest.fixture
def auth_service(store, tokens):
    return AuthService(store, tokens, pwd_context=build_password_context(rounds=4))


@pytest.fixture
def account_service(store):
    return AccountService(store)


@pytest.fixture
def ledger(store):
    return LedgerService(store, backoff_seconds=0)


@pytest.fixture
def user(auth_service):
    return auth_service.register("owner@example.com", "password123")


@pytest.fixture
def other_user(auth_service):
    return auth_service.register("other@example.com", "password123")


@pytest.fixture
def make_account(account_service, user):
    """Helper: open an account for `user` (or the given owner)."""
    def _make(account_id="acct-1", balance="0", owner=None):
        return account_service.create_account(
            user_id=(owner or user).user_id,
            account_id=account_id,
            customer_name="Test Customer",
            initial_balance=Decimal(balance),
        )
    return _make


@pytest.fixture
def client(store):
    """
    Provide a test client backed by the test store.

    We override the get_store dependency so the FastAPI app
    uses our test database instead of the configured one.
    """
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def register_and_login(client):
    """Helper: register a user over HTTP and return auth headers."""
    def _login(email="alice@example.com", password="password123"):
        client.post("/auth/register", json={"email": email, "password": password})
        response = client.post("/auth/login", json={"email": email, "password": password})
        tokens = response.json()
        return {
            "headers": {"Authorization": f"Bearer {tokens['access_token']}"},
            "refresh_token": tokens["refresh_token"],
        }
    return _login
