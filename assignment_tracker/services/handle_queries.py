"""Query Handlers — get_task, get_user, list_tasks, list_users.

Invariants:
    - Read-only: never writes to either collection
    - get_* raise ResourceNotFoundError for unknown ids
    - list_* accept the flat equality/membership filter of DocumentCollection
"""

from assignment_tracker.core.errors import ErrorContext, ResourceNotFoundError
from assignment_tracker.core.repository_protocols import (
    DocumentCollection, Filters,
)
from assignment_tracker.schemas.task import TaskResponse
from assignment_tracker.schemas.user import UserResponse


class QueryHandlers:
    """Lookups over both collections."""

    def __init__(self, tasks: DocumentCollection, users: DocumentCollection):
        self.tasks = tasks
        self.users = users

    async def get_task(self, task_id: str) -> TaskResponse:
        task = await self.tasks.find_by_id(task_id)
        if task is None:
            raise ResourceNotFoundError("Task", task_id, ErrorContext(task_id=task_id))
        return TaskResponse.model_validate(task)

    async def get_user(self, user_id: str) -> UserResponse:
        user = await self.users.find_by_id(user_id)
        if user is None:
            raise ResourceNotFoundError("User", user_id, ErrorContext(user_id=user_id))
        return UserResponse.model_validate(user)

    async def list_tasks(self, filters: Filters | None = None) -> list[TaskResponse]:
        return [
            TaskResponse.model_validate(t)
            for t in await self.tasks.find(filters or {})
        ]

    async def list_users(self, filters: Filters | None = None) -> list[UserResponse]:
        return [
            UserResponse.model_validate(u)
            for u in await self.users.find(filters or {})
        ]
