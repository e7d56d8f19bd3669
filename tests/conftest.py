"""Root conftest — shared test configuration and store fixtures.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - Collections and engine are wired exactly like bootstrap.engine_lifespan,
      minus logging setup and pool arguments

Design Decisions:
    - SQLite in-memory with StaticPool: one shared connection, so every adapter
      call (each in its own session) sees the same database
    - DatabaseSessionManager built via __new__: skips pool_size/max_overflow,
      which SQLite's pool does not accept
"""

import os
from datetime import datetime, timezone

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.pool import StaticPool

# Ensure tests never reach a real database
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from assignment_tracker.db.base import Base  # noqa: E402
from assignment_tracker.infrastructure.database import DatabaseSessionManager  # noqa: E402
from assignment_tracker.infrastructure.document_store import SqlDocumentCollection  # noqa: E402
from assignment_tracker.models.task import Task  # noqa: E402
from assignment_tracker.models.user import User  # noqa: E402
from assignment_tracker.services.relationship_engine import RelationshipEngine  # noqa: E402


DEADLINE = datetime(2024, 1, 1, tzinfo=timezone.utc)


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def db_manager(test_engine):
    manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    manager.engine = test_engine
    manager._session_factory = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )
    return manager


@pytest.fixture
def tasks(db_manager):
    return SqlDocumentCollection(db_manager, Task)


@pytest.fixture
def users(db_manager):
    return SqlDocumentCollection(db_manager, User)


@pytest.fixture
def engine(tasks, users):
    return RelationshipEngine(tasks, users)


@pytest.fixture
def deadline():
    return DEADLINE
