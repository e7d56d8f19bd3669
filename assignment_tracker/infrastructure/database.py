"""Database Session Manager — async connection pool with automatic rollback.

Invariants:
    - Every session rolls back on exception before it is closed
    - Connection pool uses pool_pre_ping for stale connection detection
    - Every SQLAlchemy exception leaves the session as a StoreFailureError
      (core/errors.py), integrity violations as its StoreConflictError subclass;
      driver messages go to the log only

Design Decisions:
    - Singleton db_manager initialized by the composition root (bootstrap.py):
      no global import side effects
    - expire_on_commit=False: documents are read off instances after commit
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

from assignment_tracker.core.errors import StoreConflictError, StoreFailureError

logger = logging.getLogger(__name__)

# Checked in order: IntegrityError and OperationalError are DBAPIError subclasses
_FAILURE_MAP: tuple[
    tuple[type[SQLAlchemyError], type[StoreFailureError], str, str], ...
] = (
    (IntegrityError, StoreConflictError, "commit", "Integrity constraint violated"),
    (OperationalError, StoreFailureError, "execute", "Connection or operational error"),
    (DBAPIError, StoreFailureError, "query", "Database driver error"),
)


def to_store_failure(error: SQLAlchemyError) -> StoreFailureError:
    """Translate a SQLAlchemy exception into the engine's StoreFailureError."""
    for error_type, failure_type, operation, message in _FAILURE_MAP:
        if isinstance(error, error_type):
            return failure_type(message, operation)
    return StoreFailureError("Database operation failed", "unknown")


class DatabaseSessionManager:
    """Owns the async engine and hands out short-lived sessions."""

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
        """One session per store call; rolled back and mapped on failure."""
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            failure = to_store_failure(e)
            logger.error(
                f"Store {failure.operation} error: {e}",
                extra={"error_code": failure.code},
            )
            raise failure from e
        finally:
            await session.close()

    async def dispose(self) -> None:
        await self.engine.dispose()


# Singleton (initialized by bootstrap)
db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    return db_manager


async def dispose_db() -> None:
    global db_manager
    if db_manager is not None:
        await db_manager.dispose()
        db_manager = None
