"""Database Session Manager — pooled asyncpg engine and per-request sessions for subscriber storage.

Invariants:
    - One AsyncSession per request; it is rolled back and closed on any exception
    - Commits belong to the caller: registration commits subscriber + token together,
      set_confirmed commits its single UPDATE on its own
    - SQLAlchemy exceptions escaping a session become DatabaseError (500, message hidden)
    - Stale pooled connections are detected with pool_pre_ping

Design Decisions:
    - Built from DatabaseSettings in the app lifespan; disposed on shutdown
    - expire_on_commit=False: confirmed rows stay readable after commit without a reload
    - No request-wide transaction: lookup and update in confirmation are separate statements
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.engine import URL
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.exc import (
    IntegrityError, OperationalError, DBAPIError, SQLAlchemyError,
)
from sqlalchemy import text

from newsletter.config import DatabaseSettings
from newsletter.core.errors import DatabaseError

logger = logging.getLogger(__name__)

# Most specific first: IntegrityError and OperationalError are DBAPIErrors.
_FAILURES: tuple[tuple[type[SQLAlchemyError], str, str], ...] = (
    (IntegrityError, "Integrity constraint violated", "commit"),
    (OperationalError, "Connection or operational error", "execute"),
    (DBAPIError, "Database driver error", "query"),
)


def _describe_failure(e: SQLAlchemyError) -> tuple[str, str]:
    for error_type, message, operation in _FAILURES:
        if isinstance(e, error_type):
            return message, operation
    return "Database operation failed", "unknown"


class DatabaseSessionManager:
    """Owns the engine and hands out sessions to routes and the readiness probe."""

    def __init__(
        self,
        database_url: URL | str,
        pool_size: int = 20,
        max_overflow: int = 10,
        connect_args: dict | None = None,
    ):
        self.engine = create_async_engine(
            database_url,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_pre_ping=True,
            pool_recycle=3600,
            connect_args=connect_args or {},
        )
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @classmethod
    def from_settings(cls, settings: DatabaseSettings) -> "DatabaseSessionManager":
        return cls(
            settings.connection_url(),
            pool_size=settings.pool_size,
            max_overflow=settings.max_overflow,
            connect_args=settings.connect_args(),
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Session for one request; rolled back and mapped to DatabaseError on failure."""
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            message, operation = _describe_failure(e)
            logger.error(f"{message}: {e}", extra={"operation": operation})
            raise DatabaseError(message, operation) from e
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


# Singleton (initialized on startup)
db_manager: DatabaseSessionManager | None = None


def init_db(settings: DatabaseSettings) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager.from_settings(settings)
    return db_manager


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    if not db_manager:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session
