"""Task ORM — persists one document of the `tasks` collection.

Invariants:
    - id is an opaque string key (uuid4 text), generated on insert
    - assigned_user is None when unassigned; never an empty string
    - assigned_user_name defaults to "unassigned" and is written by the engine only
    - date_created is set once on insert

Design Decisions:
    - assigned_user has no ForeignKey: deleting a user must not be blocked or
      cascaded by the database; the engine clears the references itself
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, Text, Boolean, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from assignment_tracker.core.domain_types import UNASSIGNED_NAME, Collection
from assignment_tracker.db.base import Base


class Task(Base):
    """Task document: a unit of work with at most one assigned user."""
    __tablename__ = Collection.TASKS.value

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4()),
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    deadline: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )
    completed: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False,
    )
    assigned_user: Mapped[str | None] = mapped_column(
        String(36), nullable=True, index=True,
    )
    assigned_user_name: Mapped[str] = mapped_column(
        Text, nullable=False, default=UNASSIGNED_NAME,
    )
    date_created: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
