"""Relationship Engine — the single entry point callers use to mutate tasks and users.

Invariants:
    - Every public operation maps to exactly one handler method, listed below
    - No in-process mutable state: the engine holds collection references and
      settings only, so concurrent callers never share engine state
    - Operations are not atomic across collections; audit() reports any drift
      left behind by a failed multi-step write

Design Decisions:
    - Explicit method table over __getattr__ forwarding: every operation visible
      in one place
    - Handlers split by side (tasks, users, queries): max ~4 methods per class
"""

import logging

from assignment_tracker.core.consistency_audit import Violation, find_violations
from assignment_tracker.core.repository_protocols import DocumentCollection
from assignment_tracker.services.handle_queries import QueryHandlers
from assignment_tracker.services.handle_tasks import TaskHandlers
from assignment_tracker.services.handle_users import UserHandlers

logger = logging.getLogger(__name__)


class RelationshipEngine:
    """Keeps Task.assigned_user and User.pending_tasks consistent."""

    def __init__(
        self,
        tasks: DocumentCollection,
        users: DocumentCollection,
        cascade_user_rename: bool = False,
    ):
        self._tasks = tasks
        self._users = users
        task_handlers = TaskHandlers(tasks, users)
        user_handlers = UserHandlers(tasks, users, cascade_user_rename)
        queries = QueryHandlers(tasks, users)

        # Task side
        self.create_task = task_handlers.create_task
        self.update_task = task_handlers.update_task
        self.delete_task = task_handlers.delete_task

        # User side
        self.create_user = user_handlers.create_user
        self.update_user = user_handlers.update_user
        self.delete_user = user_handlers.delete_user

        # Reads
        self.get_task = queries.get_task
        self.get_user = queries.get_user
        self.list_tasks = queries.list_tasks
        self.list_users = queries.list_users

    async def audit(self) -> list[Violation]:
        """Snapshot both collections and report every invariant violation."""
        tasks = await self._tasks.find({})
        users = await self._users.find({})
        violations = find_violations(tasks, users)
        if violations:
            logger.warning(
                f"Consistency audit found {len(violations)} violation(s)",
                extra={"error_code": "CONSISTENCY_VIOLATION"},
            )
        return violations
