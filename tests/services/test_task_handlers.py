"""Task Handlers — create/update/delete tasks against the SQLite-backed store.

Invariants:
    - CreateTask with an assignee registers the task on that user (Scenario A)
    - UpdateTask moves the task between users and re-stamps the name (Scenario B)
    - Unknown assignee on create rejects; on update falls back to unassigned
    - DeleteTask removes the id from every user that lists it, owner or not
"""

import pytest

from assignment_tracker.core.errors import (
    ReferenceNotFoundError, ResourceNotFoundError,
)


# ─── create_task ─────────────────────────────────────────────────

async def test_create_unassigned_task(engine, deadline):
    task = await engine.create_task(name="Write spec", deadline=deadline)
    assert task.assigned_user is None
    assert task.assigned_user_name == "unassigned"
    assert task.completed is False
    assert task.description == ""


async def test_scenario_a_create_assigned_task(engine, deadline):
    alice = await engine.create_user(name="Alice", email="alice@x.com")
    task = await engine.create_task(
        name="Write spec", deadline=deadline, assigned_user_id=alice.id,
    )
    assert task.assigned_user == alice.id
    assert task.assigned_user_name == "Alice"
    assert (await engine.get_user(alice.id)).pending_tasks == [task.id]


async def test_create_with_unknown_user_creates_nothing(engine, deadline):
    with pytest.raises(ReferenceNotFoundError) as exc_info:
        await engine.create_task(
            name="Orphan", deadline=deadline, assigned_user_id="ghost",
        )
    assert exc_info.value.user_id == "ghost"
    assert await engine.list_tasks() == []


async def test_create_keeps_existing_pending_tasks(engine, deadline):
    alice = await engine.create_user(name="Alice", email="alice@x.com")
    first = await engine.create_task(name="One", deadline=deadline, assigned_user_id=alice.id)
    second = await engine.create_task(name="Two", deadline=deadline, assigned_user_id=alice.id)
    assert (await engine.get_user(alice.id)).pending_tasks == [first.id, second.id]


# ─── update_task ─────────────────────────────────────────────────

async def test_scenario_b_reassign_task(engine, deadline):
    alice = await engine.create_user(name="Alice", email="alice@x.com")
    bob = await engine.create_user(name="Bob", email="bob@x.com")
    task = await engine.create_task(name="T", deadline=deadline, assigned_user_id=alice.id)

    updated = await engine.update_task(
        task.id, name="T", deadline=deadline, assigned_user_id=bob.id,
    )

    assert updated.assigned_user == bob.id
    assert updated.assigned_user_name == "Bob"
    assert task.id not in (await engine.get_user(alice.id)).pending_tasks
    assert (await engine.get_user(bob.id)).pending_tasks == [task.id]


async def test_update_unknown_task(engine, deadline):
    with pytest.raises(ResourceNotFoundError):
        await engine.update_task("nope", name="T", deadline=deadline)


async def test_update_to_unknown_user_falls_back_to_unassigned(engine, deadline):
    alice = await engine.create_user(name="Alice", email="alice@x.com")
    task = await engine.create_task(name="T", deadline=deadline, assigned_user_id=alice.id)

    updated = await engine.update_task(
        task.id, name="T", deadline=deadline, assigned_user_id="ghost",
    )

    assert updated.assigned_user is None
    assert updated.assigned_user_name == "unassigned"
    assert (await engine.get_user(alice.id)).pending_tasks == []


async def test_update_without_assignee_unassigns(engine, deadline):
    alice = await engine.create_user(name="Alice", email="alice@x.com")
    task = await engine.create_task(name="T", deadline=deadline, assigned_user_id=alice.id)

    updated = await engine.update_task(task.id, name="T", deadline=deadline)

    assert updated.assigned_user is None
    assert updated.assigned_user_name == "unassigned"
    assert (await engine.get_user(alice.id)).pending_tasks == []


async def test_update_same_assignee_leaves_users_alone(engine, users, deadline, monkeypatch):
    alice = await engine.create_user(name="Alice", email="alice@x.com")
    task = await engine.create_task(name="T", deadline=deadline, assigned_user_id=alice.id)

    calls = []
    original = users.update_by_id

    async def _spy(doc_id, fields):
        calls.append(doc_id)
        return await original(doc_id, fields)

    monkeypatch.setattr(users, "update_by_id", _spy)
    updated = await engine.update_task(
        task.id, name="Renamed", deadline=deadline, assigned_user_id=alice.id,
    )

    assert calls == []
    assert updated.name == "Renamed"
    assert updated.assigned_user_name == "Alice"
    assert (await engine.get_user(alice.id)).pending_tasks == [task.id]


async def test_update_assigns_previously_unassigned_task(engine, deadline):
    bob = await engine.create_user(name="Bob", email="bob@x.com")
    task = await engine.create_task(name="T", deadline=deadline)

    updated = await engine.update_task(
        task.id, name="T", deadline=deadline, assigned_user_id=bob.id,
    )

    assert updated.assigned_user_name == "Bob"
    assert (await engine.get_user(bob.id)).pending_tasks == [task.id]


async def test_update_keeps_description_and_completed_when_omitted(engine, deadline):
    task = await engine.create_task(
        name="T", deadline=deadline, description="details", completed=True,
    )
    updated = await engine.update_task(task.id, name="T2", deadline=deadline)
    assert updated.description == "details"
    assert updated.completed is True

    updated = await engine.update_task(
        task.id, name="T2", deadline=deadline, description="", completed=False,
    )
    assert updated.description == ""
    assert updated.completed is False


async def test_update_task_whose_owner_vanished(engine, tasks, deadline):
    bob = await engine.create_user(name="Bob", email="bob@x.com")
    task = await tasks.insert({
        "name": "Stale", "deadline": deadline,
        "assigned_user": "ghost", "assigned_user_name": "Ghost",
    })

    updated = await engine.update_task(
        task["id"], name="Stale", deadline=deadline, assigned_user_id=bob.id,
    )

    assert updated.assigned_user == bob.id
    assert (await engine.get_user(bob.id)).pending_tasks == [task["id"]]


# ─── delete_task ─────────────────────────────────────────────────

async def test_delete_task_removes_it_from_owner(engine, deadline):
    alice = await engine.create_user(name="Alice", email="alice@x.com")
    keep = await engine.create_task(name="Keep", deadline=deadline, assigned_user_id=alice.id)
    drop = await engine.create_task(name="Drop", deadline=deadline, assigned_user_id=alice.id)

    deleted = await engine.delete_task(drop.id)

    assert deleted.id == drop.id
    assert (await engine.get_user(alice.id)).pending_tasks == [keep.id]
    with pytest.raises(ResourceNotFoundError):
        await engine.get_task(drop.id)


async def test_delete_unassigned_task(engine, deadline):
    task = await engine.create_task(name="T", deadline=deadline)
    deleted = await engine.delete_task(task.id)
    assert deleted.assigned_user is None


async def test_delete_unknown_task(engine):
    with pytest.raises(ResourceNotFoundError) as exc_info:
        await engine.delete_task("nope")
    assert exc_info.value.http_status == 404


async def test_delete_task_scrubs_every_listing_user(engine, deadline):
    carol = await engine.create_user(name="Carol", email="carol@x.com")
    task = await engine.create_task(name="T", deadline=deadline, assigned_user_id=carol.id)
    # unchecked claim: Dan now owns the task while Carol still lists it
    dan = await engine.create_user(name="Dan", email="dan@x.com", pending_tasks=[task.id])

    await engine.delete_task(task.id)

    assert all(task.id not in u.pending_tasks for u in await engine.list_users())
    assert (await engine.get_user(carol.id)).pending_tasks == []
    assert (await engine.get_user(dan.id)).pending_tasks == []
    assert await engine.audit() == []
