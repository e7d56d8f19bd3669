"""User Handlers — create_user, update_user, delete_user.

Invariants:
    - Email uniqueness checked before any write (DuplicateEmail has no side effects)
    - A concurrent writer that takes the email between check and write still
      surfaces as DuplicateEmailError (translated from StoreConflictError)
    - update_user with pending_tasks runs the conflict detector on the snapshot it
      read; any conflict rejects the whole call with zero writes
    - update_user persists the user document LAST, after the task-side writes
    - delete_user releases tasks by filter on assigned_user, not via pending_tasks

Design Decisions:
    - create_user and update_user are deliberately different contracts:
      create_user bulk-claims its initial pending_tasks without checking that
      those tasks exist or are free; update_user checks both
    - Unknown task ids in update_user's pending_tasks are dropped with a warning
      rather than stored, so the saved list never dangles
    - Renaming a user re-stamps its tasks' cached name only when
      cascade_user_rename is enabled (off by default)
"""

import logging

from assignment_tracker.core.conflict_detector import detect_conflicts
from assignment_tracker.core.denormalization import (
    assignment_fields, unassigned_fields,
)
from assignment_tracker.core.domain_types import Operation, UserId
from assignment_tracker.core.errors import (
    AssignmentConflictError, DuplicateEmailError, ErrorContext,
    ResourceNotFoundError, StoreConflictError,
)
from assignment_tracker.core.pending_tasks import diff_pending_tasks, normalize
from assignment_tracker.core.repository_protocols import DocumentCollection
from assignment_tracker.schemas.user import UserResponse

logger = logging.getLogger(__name__)


class UserHandlers:
    """User-side transitions of the assignment relationship."""

    def __init__(
        self,
        tasks: DocumentCollection,
        users: DocumentCollection,
        cascade_user_rename: bool = False,
    ):
        self.tasks = tasks
        self.users = users
        self.cascade_user_rename = cascade_user_rename

    async def create_user(
        self,
        *,
        name: str,
        email: str,
        pending_tasks: list[str] | None = None,
    ) -> UserResponse:
        """Insert a user, then point every listed task at it (unchecked)."""
        await self._ensure_email_available(email, Operation.CREATE_USER)

        pending = normalize(pending_tasks or [])
        try:
            user = await self.users.insert({
                "name": name, "email": email, "pending_tasks": pending,
            })
        except StoreConflictError as e:
            raise DuplicateEmailError(
                email, ErrorContext(operation=Operation.CREATE_USER.value),
            ) from e
        if pending:
            await self.tasks.update_many({"id": pending}, assignment_fields(user))

        logger.info(
            f"User '{user['id']}' created with {len(pending)} pending task(s)",
            extra={"user_id": user["id"], "operation": Operation.CREATE_USER.value},
        )
        return UserResponse.model_validate(user)

    async def update_user(
        self,
        user_id: str,
        *,
        name: str,
        email: str,
        pending_tasks: list[str] | None = None,
    ) -> UserResponse:
        """Replace name/email and, if given, reconcile the pending task set."""
        user = await self.users.find_by_id(user_id)
        if user is None:
            raise ResourceNotFoundError(
                "User", user_id,
                ErrorContext(user_id=user_id, operation=Operation.UPDATE_USER.value),
            )
        await self._ensure_email_available(
            email, Operation.UPDATE_USER, exclude_user_id=user_id,
        )

        fields: dict = {"name": name, "email": email}
        if pending_tasks is not None:
            fields["pending_tasks"] = await self._reconcile_pending_tasks(
                user, name, normalize(pending_tasks),
            )

        try:
            updated = await self.users.update_by_id(user_id, fields)
        except StoreConflictError as e:
            raise DuplicateEmailError(
                email,
                ErrorContext(user_id=user_id, operation=Operation.UPDATE_USER.value),
            ) from e
        if updated is None:
            raise ResourceNotFoundError(
                "User", user_id,
                ErrorContext(user_id=user_id, operation=Operation.UPDATE_USER.value),
            )

        if self.cascade_user_rename and name != user["name"]:
            renamed = await self.tasks.update_many(
                {"assigned_user": user_id}, {"assigned_user_name": name},
            )
            logger.info(
                f"Renamed user '{user_id}' on {renamed} task(s)",
                extra={"user_id": user_id, "operation": Operation.UPDATE_USER.value},
            )

        logger.info(
            f"User '{user_id}' updated",
            extra={"user_id": user_id, "operation": Operation.UPDATE_USER.value},
        )
        return UserResponse.model_validate(updated)

    async def delete_user(self, user_id: str) -> UserResponse:
        """Delete a user and release every task still assigned to it."""
        user = await self.users.delete_by_id(user_id)
        if user is None:
            raise ResourceNotFoundError(
                "User", user_id,
                ErrorContext(user_id=user_id, operation=Operation.DELETE_USER.value),
            )

        released = await self.tasks.update_many(
            {"assigned_user": user_id}, unassigned_fields(),
        )
        logger.info(
            f"User '{user_id}' deleted, {released} task(s) released",
            extra={"user_id": user_id, "operation": Operation.DELETE_USER.value},
        )
        return UserResponse.model_validate(user)

    async def _ensure_email_available(
        self, email: str, operation: Operation, exclude_user_id: str | None = None,
    ) -> None:
        holders = await self.users.find({"email": email})
        if any(holder["id"] != exclude_user_id for holder in holders):
            raise DuplicateEmailError(
                email,
                ErrorContext(user_id=exclude_user_id, operation=operation.value),
            )

    async def _reconcile_pending_tasks(
        self, user: dict, new_name: str, requested: list[str],
    ) -> list[str]:
        """Check conflicts, release dropped tasks, claim new ones.

        Returns the pending_tasks list to persist on the user.
        """
        user_id = UserId(user["id"])
        candidates = await self.tasks.find({"id": requested}) if requested else []

        conflicts = detect_conflicts(user_id, candidates)
        if conflicts:
            logger.warning(
                f"Rejected pending_tasks update for user '{user_id}'",
                extra={
                    "user_id": user_id,
                    "operation": Operation.UPDATE_USER.value,
                    "error_code": "ASSIGNMENT_CONFLICT",
                    "conflict_count": len(conflicts),
                },
            )
            raise AssignmentConflictError(
                conflicts,
                ErrorContext(user_id=user_id, operation=Operation.UPDATE_USER.value),
            )

        found = {task["id"]: task for task in candidates}
        missing = [task_id for task_id in requested if task_id not in found]
        if missing:
            logger.warning(
                f"Ignoring {len(missing)} unknown task id(s) for user '{user_id}'",
                extra={"user_id": user_id, "operation": Operation.UPDATE_USER.value},
            )
        resolved = [task_id for task_id in requested if task_id in found]

        diff = diff_pending_tasks(user["pending_tasks"], resolved)
        # kept entries whose task no longer points back at this user
        relisted = [
            task_id for task_id in resolved
            if task_id not in diff.added
            and found[task_id].get("assigned_user") != user_id
        ]
        to_claim = [*diff.added, *relisted]
        if diff.is_empty and not relisted:
            return resolved

        logger.info(
            f"User '{user_id}' pending_tasks: {len(diff.dropped)} dropped, "
            f"{len(diff.added)} added, {len(relisted)} re-claimed",
            extra={"user_id": user_id, "operation": Operation.UPDATE_USER.value},
        )

        if diff.dropped:
            await self.tasks.update_many(
                {"id": diff.dropped, "assigned_user": user_id}, unassigned_fields(),
            )
        if to_claim:
            await self.tasks.update_many(
                {"id": to_claim},
                assignment_fields({"id": user_id, "name": new_name}),
            )
        return resolved
