"""Denormalization Maintainer — computes the cached assigned_user_name on tasks.

Invariants:
    - assigned_user_name == referenced user's name when the user resolves
    - assigned_user_name == UNASSIGNED_NAME whenever assigned_user is None
    - assigned_user and assigned_user_name are always written together

Design Decisions:
    - Cache-on-write, not resolve-on-read: the name is stamped by each transition
      that changes an assignment; no background reconciliation pass
"""

from assignment_tracker.core.domain_types import UNASSIGNED_NAME


def resolve_assigned_user_name(user: dict | None) -> str:
    """Name to cache on a task pointing at `user` (None = unresolvable or absent)."""
    if user is None:
        return UNASSIGNED_NAME
    return user["name"]


def assignment_fields(user: dict | None) -> dict:
    """Task fields for an assignment to `user`, or the unassigned pair if None."""
    if user is None:
        return unassigned_fields()
    return {
        "assigned_user": user["id"],
        "assigned_user_name": resolve_assigned_user_name(user),
    }


def unassigned_fields() -> dict:
    return {"assigned_user": None, "assigned_user_name": UNASSIGNED_NAME}
