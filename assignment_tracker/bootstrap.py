"""Composition Root — wires settings, logging, database and engine together.

Invariants:
    - Logging configured and database initialized exactly once per lifespan
    - The engine pool is disposed on exit, even if the caller raised

Design Decisions:
    - Async context manager mirrors a web framework lifespan: any calling layer
      (HTTP app, worker, script) enters it once at startup
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from assignment_tracker.config import Settings, get_settings
from assignment_tracker.infrastructure.database import dispose_db, init_db
from assignment_tracker.infrastructure.document_store import SqlDocumentCollection
from assignment_tracker.infrastructure.observability import setup_logging
from assignment_tracker.models.task import Task
from assignment_tracker.models.user import User
from assignment_tracker.services.relationship_engine import RelationshipEngine

logger = logging.getLogger(__name__)


@asynccontextmanager
async def engine_lifespan(
    settings: Settings | None = None,
) -> AsyncIterator[RelationshipEngine]:
    """Startup/shutdown lifecycle around a ready-to-use RelationshipEngine."""
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    engine = RelationshipEngine(
        SqlDocumentCollection(manager, Task),
        SqlDocumentCollection(manager, User),
        cascade_user_rename=settings.cascade_user_rename,
    )
    logger.info("Assignment tracker started")
    try:
        yield engine
    finally:
        await dispose_db()
        logger.info("Assignment tracker shut down")
