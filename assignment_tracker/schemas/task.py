"""Task Schemas — the Task payload returned by engine operations.

Invariants:
    - assigned_user is None when unassigned (never "")
    - assigned_user_name is "unassigned" exactly when assigned_user is None,
      after any successful engine call that touched the task
"""

from datetime import datetime

from pydantic import BaseModel

from assignment_tracker.core.domain_types import UNASSIGNED_NAME


class TaskResponse(BaseModel):
    """Task as stored, after an engine transition."""
    id: str
    name: str
    description: str = ""
    deadline: datetime
    completed: bool = False
    assigned_user: str | None = None
    assigned_user_name: str = UNASSIGNED_NAME
    date_created: datetime

    @property
    def is_assigned(self) -> bool:
        return self.assigned_user is not None
