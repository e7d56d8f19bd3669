"""Task Handlers — create_task, update_task, delete_task.

Invariants:
    - create_task checks the assigned user BEFORE inserting: ReferenceNotFound
      leaves no task behind
    - update_task touches user documents only when the assignment actually changes
    - An unresolvable assignee on update falls back to unassigned (never fails the update)
    - After success, the old and new owner's pending_tasks agree with the task
      and assigned_user_name matches the owner
    - After delete_task, no user lists the deleted id, owner or not

Design Decisions:
    - Read everything first, then write: each transition derives its writes from one
      snapshot, so a validation failure happens before the first write
    - No rollback: a StoreFailureError after the task write leaves that write in place;
      the consistency audit reports the resulting drift
    - delete_task scans users for the id instead of trusting assigned_user alone:
      create_user's unchecked claim can leave a second user listing the task
"""

import logging
from datetime import datetime

from assignment_tracker.core.denormalization import assignment_fields
from assignment_tracker.core.domain_types import Operation
from assignment_tracker.core.errors import (
    ErrorContext, ReferenceNotFoundError, ResourceNotFoundError,
)
from assignment_tracker.core.pending_tasks import with_task, without_task
from assignment_tracker.core.repository_protocols import DocumentCollection
from assignment_tracker.schemas.task import TaskResponse

logger = logging.getLogger(__name__)


class TaskHandlers:
    """Task-side transitions of the assignment relationship."""

    def __init__(self, tasks: DocumentCollection, users: DocumentCollection):
        self.tasks = tasks
        self.users = users

    async def create_task(
        self,
        *,
        name: str,
        deadline: datetime,
        description: str | None = None,
        completed: bool = False,
        assigned_user_id: str | None = None,
    ) -> TaskResponse:
        """Insert a task, then register it in the assignee's pending_tasks."""
        user = None
        if assigned_user_id:
            user = await self.users.find_by_id(assigned_user_id)
            if user is None:
                raise ReferenceNotFoundError(
                    assigned_user_id,
                    ErrorContext(
                        user_id=assigned_user_id,
                        operation=Operation.CREATE_TASK.value,
                    ),
                )

        task = await self.tasks.insert({
            "name": name,
            "description": description or "",
            "deadline": deadline,
            "completed": completed,
            **assignment_fields(user),
        })

        if user is not None:
            await self.users.update_by_id(
                user["id"],
                {"pending_tasks": with_task(user["pending_tasks"], task["id"])},
            )

        logger.info(
            f"Task '{task['id']}' created",
            extra={
                "task_id": task["id"],
                "user_id": task["assigned_user"],
                "operation": Operation.CREATE_TASK.value,
            },
        )
        return TaskResponse.model_validate(task)

    async def update_task(
        self,
        task_id: str,
        *,
        name: str,
        deadline: datetime,
        assigned_user_id: str | None = None,
        description: str | None = None,
        completed: bool | None = None,
    ) -> TaskResponse:
        """Replace a task's fields; move it between users if the assignee changed.

        assigned_user_id=None means "unassigned". description/completed=None keep
        the stored values.
        """
        task = await self.tasks.find_by_id(task_id)
        if task is None:
            raise ResourceNotFoundError(
                "Task", task_id,
                ErrorContext(task_id=task_id, operation=Operation.UPDATE_TASK.value),
            )

        fields: dict = {"name": name, "deadline": deadline}
        if description is not None:
            fields["description"] = description
        if completed is not None:
            fields["completed"] = completed

        requested = assigned_user_id or None
        if requested != task["assigned_user"]:
            fields.update(await self._reassign(task, requested))

        updated = await self.tasks.update_by_id(task_id, fields)
        if updated is None:
            # deleted by a concurrent caller between our read and write
            raise ResourceNotFoundError(
                "Task", task_id,
                ErrorContext(task_id=task_id, operation=Operation.UPDATE_TASK.value),
            )

        logger.info(
            f"Task '{task_id}' updated",
            extra={
                "task_id": task_id,
                "user_id": updated["assigned_user"],
                "operation": Operation.UPDATE_TASK.value,
            },
        )
        return TaskResponse.model_validate(updated)

    async def delete_task(self, task_id: str) -> TaskResponse:
        """Delete a task and drop it from every pending_tasks list that names it."""
        task = await self.tasks.delete_by_id(task_id)
        if task is None:
            raise ResourceNotFoundError(
                "Task", task_id,
                ErrorContext(task_id=task_id, operation=Operation.DELETE_TASK.value),
            )

        owner_id = task["assigned_user"]
        holders = [
            user for user in await self.users.find({})
            if task_id in user["pending_tasks"]
        ]
        for holder in holders:
            if holder["id"] != owner_id:
                logger.warning(
                    f"User '{holder['id']}' listed task '{task_id}' without owning it",
                    extra={
                        "task_id": task_id,
                        "user_id": holder["id"],
                        "operation": Operation.DELETE_TASK.value,
                    },
                )
            await self.users.update_by_id(
                holder["id"],
                {"pending_tasks": without_task(holder["pending_tasks"], task_id)},
            )

        logger.info(
            f"Task '{task_id}' deleted",
            extra={
                "task_id": task_id,
                "user_id": owner_id,
                "operation": Operation.DELETE_TASK.value,
            },
        )
        return TaskResponse.model_validate(task)

    async def _reassign(self, task: dict, new_user_id: str | None) -> dict:
        """Move `task` off its current owner and onto `new_user_id`.

        Returns the assignment fields to persist on the task.
        """
        task_id = task["id"]
        previous = None
        if task["assigned_user"]:
            previous = await self.users.find_by_id(task["assigned_user"])
            if previous is None:
                logger.warning(
                    f"Previous owner '{task['assigned_user']}' of task '{task_id}' is gone",
                    extra={
                        "task_id": task_id,
                        "user_id": task["assigned_user"],
                        "operation": Operation.UPDATE_TASK.value,
                    },
                )

        new_user = None
        if new_user_id:
            new_user = await self.users.find_by_id(new_user_id)
            if new_user is None:
                logger.warning(
                    f"Assignee '{new_user_id}' not found, task '{task_id}' left unassigned",
                    extra={
                        "task_id": task_id,
                        "user_id": new_user_id,
                        "operation": Operation.UPDATE_TASK.value,
                    },
                )

        if previous is not None:
            await self.users.update_by_id(
                previous["id"],
                {"pending_tasks": without_task(previous["pending_tasks"], task_id)},
            )
        if new_user is not None:
            await self.users.update_by_id(
                new_user["id"],
                {"pending_tasks": with_task(new_user["pending_tasks"], task_id)},
            )
        return assignment_fields(new_user)
