"""ORM Models — one table per document collection.

Invariants:
    - All models inherit from Base (db/base.py)
    - No ORM relationship() between Task and User: the link is a plain document
      reference maintained by the assignment engine, not by the database

Design Decisions:
    - All models imported here so Base.metadata is complete for create_all and alembic
"""

from assignment_tracker.models.task import Task  # noqa: F401
from assignment_tracker.models.user import User  # noqa: F401
