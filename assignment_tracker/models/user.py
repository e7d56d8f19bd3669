"""User ORM — persists one document of the `users` collection.

Invariants:
    - email is unique (database constraint backs the engine's DuplicateEmail check)
    - pending_tasks is a JSON list of task ids with set semantics
    - date_created is set once on insert

Design Decisions:
    - JSON column for pending_tasks: mirrors the embedded-array shape of a document
      store; the engine always writes a fresh list, never mutates in place
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, DateTime, JSON
from sqlalchemy.orm import Mapped, mapped_column

from assignment_tracker.core.domain_types import Collection
from assignment_tracker.db.base import Base


class User(Base):
    """User document that owns a set of pending tasks."""
    __tablename__ = Collection.USERS.value

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4()),
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str] = mapped_column(
        String(320), nullable=False, unique=True,
    )
    pending_tasks: Mapped[list] = mapped_column(
        JSON, nullable=False, default=list,
    )
    date_created: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
