"""Conflict Detector — finds tasks a user is trying to claim from another owner.

Invariants:
    - detect_conflicts is PURE: reads task snapshots, returns conflicts, never mutates
    - A task owned by nobody, or already by the claiming user, is never a conflict
    - Empty result means the caller may proceed; non-empty means reject the whole batch

Design Decisions:
    - Operates on the snapshot the caller already read: the check and the later
      writes see the same state (no second read between them)
"""

from dataclasses import dataclass
from typing import Iterable

from assignment_tracker.core.domain_types import TaskId, UserId


@dataclass(frozen=True)
class AssignmentConflict:
    """A task the claimant wants that currently belongs to someone else."""
    task_id: TaskId
    current_owner: UserId


def detect_conflicts(
    claimant_id: UserId, tasks: Iterable[dict],
) -> list[AssignmentConflict]:
    """Return tasks whose current assigned_user is set and is not the claimant."""
    conflicts = []
    for task in tasks:
        owner = task.get("assigned_user")
        if owner and owner != claimant_id:
            conflicts.append(AssignmentConflict(task["id"], owner))
    return conflicts
