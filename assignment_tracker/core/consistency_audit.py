"""Consistency Audit — checks the task/user relationship invariants on full snapshots.

Invariants:
    - find_violations is PURE: takes lists of task and user documents, returns violations
    - An empty result means every relationship invariant holds for the snapshot
    - Each violation names the offending task and/or user; it never proposes a fix

Design Decisions:
    - Discovery only: the engine performs no transactional rollback, so a failed
      multi-step write can leave the collections out of sync; this function is how
      that drift is found before a retry or manual repair
"""

from collections import defaultdict
from dataclasses import dataclass
from enum import Enum

from assignment_tracker.core.denormalization import resolve_assigned_user_name


class ViolationCode(str, Enum):
    ORPHAN_ASSIGNMENT = "ORPHAN_ASSIGNMENT"
    MISSING_BACK_REFERENCE = "MISSING_BACK_REFERENCE"
    DANGLING_PENDING_TASK = "DANGLING_PENDING_TASK"
    FOREIGN_PENDING_TASK = "FOREIGN_PENDING_TASK"
    MULTIPLY_CLAIMED_TASK = "MULTIPLY_CLAIMED_TASK"
    STALE_ASSIGNED_USER_NAME = "STALE_ASSIGNED_USER_NAME"
    DUPLICATE_EMAIL = "DUPLICATE_EMAIL"


@dataclass(frozen=True)
class Violation:
    code: ViolationCode
    message: str
    task_id: str | None = None
    user_id: str | None = None


def find_violations(tasks: list[dict], users: list[dict]) -> list[Violation]:
    """Return every invariant violation found in the snapshot."""
    tasks_by_id = {t["id"]: t for t in tasks}
    users_by_id = {u["id"]: u for u in users}
    violations: list[Violation] = []
    violations.extend(_check_task_side(tasks, users_by_id))
    violations.extend(_check_user_side(users, tasks_by_id))
    violations.extend(_check_single_claim(users))
    violations.extend(_check_unique_emails(users))
    return violations


def _check_task_side(
    tasks: list[dict], users_by_id: dict[str, dict],
) -> list[Violation]:
    """Every assignment has a matching back-reference and name."""
    found = []
    for task in tasks:
        owner_id = task.get("assigned_user")
        owner = users_by_id.get(owner_id) if owner_id else None
        if owner_id and owner is None:
            found.append(Violation(
                ViolationCode.ORPHAN_ASSIGNMENT,
                f"Task '{task['id']}' points at missing user '{owner_id}'",
                task_id=task["id"], user_id=owner_id,
            ))
            continue
        if owner is not None and task["id"] not in owner.get("pending_tasks", []):
            found.append(Violation(
                ViolationCode.MISSING_BACK_REFERENCE,
                f"User '{owner_id}' does not list assigned task '{task['id']}'",
                task_id=task["id"], user_id=owner_id,
            ))
        expected = resolve_assigned_user_name(owner)
        if task.get("assigned_user_name") != expected:
            found.append(Violation(
                ViolationCode.STALE_ASSIGNED_USER_NAME,
                f"Task '{task['id']}' caches '{task.get('assigned_user_name')}', "
                f"expected '{expected}'",
                task_id=task["id"], user_id=owner_id,
            ))
    return found


def _check_user_side(
    users: list[dict], tasks_by_id: dict[str, dict],
) -> list[Violation]:
    """Every pending task exists and points back at its user."""
    found = []
    for user in users:
        for task_id in user.get("pending_tasks", []):
            task = tasks_by_id.get(task_id)
            if task is None:
                found.append(Violation(
                    ViolationCode.DANGLING_PENDING_TASK,
                    f"User '{user['id']}' lists missing task '{task_id}'",
                    task_id=task_id, user_id=user["id"],
                ))
            elif task.get("assigned_user") != user["id"]:
                found.append(Violation(
                    ViolationCode.FOREIGN_PENDING_TASK,
                    f"User '{user['id']}' lists task '{task_id}' "
                    f"assigned to '{task.get('assigned_user')}'",
                    task_id=task_id, user_id=user["id"],
                ))
    return found


def _check_single_claim(users: list[dict]) -> list[Violation]:
    """No task id appears in more than one user's pending_tasks."""
    claimants: dict[str, list[str]] = defaultdict(list)
    for user in users:
        for task_id in set(user.get("pending_tasks", [])):
            claimants[task_id].append(user["id"])
    return [
        Violation(
            ViolationCode.MULTIPLY_CLAIMED_TASK,
            f"Task '{task_id}' is pending for users {sorted(owners)}",
            task_id=task_id,
        )
        for task_id, owners in claimants.items()
        if len(owners) > 1
    ]


def _check_unique_emails(users: list[dict]) -> list[Violation]:
    """Email is unique across users."""
    holders: dict[str, list[str]] = defaultdict(list)
    for user in users:
        holders[user["email"]].append(user["id"])
    return [
        Violation(
            ViolationCode.DUPLICATE_EMAIL,
            f"Email '{email}' is held by users {sorted(ids)}",
        )
        for email, ids in holders.items()
        if len(ids) > 1
    ]
