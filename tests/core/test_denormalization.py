"""Denormalization Maintainer — tests for cached assigned_user_name resolution."""

from assignment_tracker.core.denormalization import (
    assignment_fields, resolve_assigned_user_name, unassigned_fields,
)
from assignment_tracker.core.domain_types import UNASSIGNED_NAME


def test_resolves_user_name():
    assert resolve_assigned_user_name({"id": "u1", "name": "Alice"}) == "Alice"


def test_missing_user_resolves_to_unassigned():
    assert resolve_assigned_user_name(None) == UNASSIGNED_NAME == "unassigned"


def test_assignment_fields_pair_id_and_name():
    assert assignment_fields({"id": "u1", "name": "Alice"}) == {
        "assigned_user": "u1", "assigned_user_name": "Alice",
    }


def test_assignment_fields_for_none_is_unassigned():
    assert assignment_fields(None) == unassigned_fields() == {
        "assigned_user": None, "assigned_user_name": "unassigned",
    }


def test_unassigned_fields_returns_fresh_dict():
    first = unassigned_fields()
    first["assigned_user"] = "x"
    assert unassigned_fields()["assigned_user"] is None
