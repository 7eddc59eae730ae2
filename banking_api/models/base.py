"""
Store client, unit-of-work sessions, and base model.

This module is the foundation for all database operations.
Every model inherits from Base. One StoreClient is built per
process and injected into every store and service.
"""

from contextlib import contextmanager
from functools import lru_cache

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from banking_api.config import get_settings


# --- Base Model Class ---
# Every database model (User, Account, Transaction, RefreshToken)
# inherits from this class.
class Base(DeclarativeBase):
    pass


class StoreClient:
    """
    Process-wide handle on the key-value store.

    Owns the engine (and its connection pool) and hands out one
    short session per unit of work. Stores never commit; the unit
    of work commits when its block exits cleanly and rolls back
    if anything raises.
    """

    def __init__(self, engine: Engine):
        self.engine = engine
        # expire_on_commit=False keeps returned records readable
        # after their unit of work has closed.
        self.session_factory = sessionmaker(
            bind=engine,
            autocommit=False,
            autoflush=False,
            expire_on_commit=False,
        )

    @classmethod
    def from_url(cls, url: str) -> "StoreClient":
        connect_args = {}
        if url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        return cls(create_engine(url, pool_pre_ping=True, connect_args=connect_args))

    @contextmanager
    def unit_of_work(self):
        """Yield a session that commits on success, rolls back on error."""
        session: Session = self.session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def create_tables(self) -> None:
        Base.metadata.create_all(bind=self.engine)

    def drop_tables(self) -> None:
        Base.metadata.drop_all(bind=self.engine)

    def ping(self) -> bool:
        """Return True if the store answers a trivial query."""
        with self.engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        return True

    def dispose(self) -> None:
        self.engine.dispose()


# --- Dependency for FastAPI ---
@lru_cache()
def get_store() -> StoreClient:
    """
    Return the process-wide store client.

    Built on first use from DATABASE_URL and reused for every
    request afterwards.
    """
    return StoreClient.from_url(get_settings().DATABASE_URL)
