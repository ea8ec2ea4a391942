"""Database Session Manager - transfer log connection pool and error translation.

Invariants:
    - Every session rolls back on exception (a failed insert leaves no row behind)
    - SQLAlchemy exceptions become DatabaseError (core/errors.py), carrying the
      username/fid being written when the caller supplies them; they are never
      turned into transfer rejection codes
    - Connection pool uses pool_pre_ping for stale connection detection

Design Decisions:
    - Singleton db_manager initialized on startup: FastAPI lifespan manages lifecycle
    - expire_on_commit=False: records stay readable after the insert commits
    - guard_writes() lets the repository attach ErrorContext to a failure that
      happens inside the request's session, where session() cannot see it
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.exc import (
    IntegrityError, OperationalError, DBAPIError, SQLAlchemyError,
)
from sqlalchemy import text

from fname_registry.core.errors import ConfigurationError, DatabaseError, ErrorContext

logger = logging.getLogger(__name__)

# Most specific first: IntegrityError and OperationalError are DBAPIErrors
_FAILURE_KINDS: tuple[tuple[type[SQLAlchemyError], str, str], ...] = (
    (IntegrityError, "Transfer log constraint violated", "commit"),
    (OperationalError, "Connection or operational error", "execute"),
    (DBAPIError, "Database driver error", "query"),
    (SQLAlchemyError, "Transfer log operation failed", "unknown"),
)


def translate_db_error(
    exc: SQLAlchemyError, context: ErrorContext | None = None,
) -> DatabaseError:
    """Map a SQLAlchemy exception to the registry's DatabaseError."""
    for kind, message, operation in _FAILURE_KINDS:
        if isinstance(exc, kind):
            break
    logger.error(
        f"Transfer log {operation} failed: {type(exc).__name__}",
        extra={
            "error_code": "DATABASE_ERROR",
            "username": context.username if context else None,
            "fid": context.fid if context else None,
        },
    )
    return DatabaseError(message, operation, context)


@asynccontextmanager
async def guard_writes(
    db: AsyncSession, context: ErrorContext | None = None,
) -> AsyncGenerator[AsyncSession, None]:
    """Roll back db and raise DatabaseError (with context) on engine failure."""
    try:
        yield db
    except SQLAlchemyError as e:
        await db.rollback()
        raise translate_db_error(e, context) from e


class DatabaseSessionManager:
    """Owns the engine and hands out sessions over the transfers table."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        self.engine = create_async_engine(
            database_url,
            pool_size=pool_size,
            max_overflow=max_overflow,
            pool_pre_ping=True,
            pool_recycle=3600,
        )
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback on exception."""
        session = self._session_factory()
        try:
            async with guard_writes(session):
                yield session
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """Check the transfer log is reachable (for readiness probes)."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except DatabaseError as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs):
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    if not db_manager:
        raise ConfigurationError("DATABASE_URL")
    async with db_manager.session() as session:
        yield session
