"""Pending Tasks — set arithmetic over a user's pending_tasks list.

Invariants:
    - pending_tasks has set semantics: every helper returns a duplicate-free list
    - First-seen order is kept so stored documents stay stable across rewrites
    - Helpers never mutate their inputs

Design Decisions:
    - Lists, not sets, on the way out: the store column is JSON and order-stable
      output keeps diffs and test assertions readable
"""

from dataclasses import dataclass
from typing import Iterable

from assignment_tracker.core.domain_types import TaskId


@dataclass(frozen=True)
class PendingTasksDiff:
    """Difference between a user's stored and requested pending tasks."""
    dropped: list[TaskId]
    added: list[TaskId]

    @property
    def is_empty(self) -> bool:
        return not self.dropped and not self.added


def normalize(task_ids: Iterable[str]) -> list[TaskId]:
    """Deduplicate while keeping first-seen order."""
    seen: set[str] = set()
    result = []
    for task_id in task_ids:
        key = str(task_id)
        if key not in seen:
            seen.add(key)
            result.append(TaskId(key))
    return result


def with_task(pending: Iterable[str], task_id: TaskId) -> list[TaskId]:
    return normalize([*pending, task_id])


def without_task(pending: Iterable[str], task_id: TaskId) -> list[TaskId]:
    return [t for t in normalize(pending) if t != task_id]


def diff_pending_tasks(
    old: Iterable[str], new: Iterable[str],
) -> PendingTasksDiff:
    """Tasks leaving (old - new) and joining (new - old) the pending set."""
    old_ids = normalize(old)
    new_ids = normalize(new)
    old_set, new_set = set(old_ids), set(new_ids)
    return PendingTasksDiff(
        dropped=[t for t in old_ids if t not in new_set],
        added=[t for t in new_ids if t not in old_set],
    )
