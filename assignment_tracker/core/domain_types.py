"""Domain Types — identity types and constants shared by the assignment engine.

Invariants:
    - TaskId, UserId wrap opaque strings; never compare a TaskId against a UserId
    - UNASSIGNED_NAME is the single source of truth for the cached name of an
      unassigned task

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

TaskId = NewType("TaskId", str)
UserId = NewType("UserId", str)


# ─── Constants ───────────────────────────────────────────────────

UNASSIGNED_NAME = "unassigned"


# ─── Enums ───────────────────────────────────────────────────────

class Collection(str, Enum):
    """Document collections the engine reads and writes."""
    TASKS = "tasks"
    USERS = "users"


class Operation(str, Enum):
    """Engine transitions, used for logging and error context."""
    CREATE_TASK = "create_task"
    UPDATE_TASK = "update_task"
    DELETE_TASK = "delete_task"
    CREATE_USER = "create_user"
    UPDATE_USER = "update_user"
    DELETE_USER = "delete_user"
