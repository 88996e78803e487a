"""Tests for task persistence."""

from __future__ import annotations

from datetime import date

import pytest

from famly.data.tasks import delete_task, get_task, get_tasks, upsert_task
from famly.errors import NotFoundError
from famly.models import TaskDraft, TaskStatus


def _draft(family, user, **changes) -> TaskDraft:
    payload = {"family_id": family.id, "title": "Laundry", "created_by": user.id}
    payload.update(changes)
    return TaskDraft(**payload)


def test_insert_defaults_to_todo(store, family, user):
    task = upsert_task(store, _draft(family, user))

    assert task.status is TaskStatus.TODO
    assert task.family_id == family.id
    assert get_tasks(store, family.id) == [task]


def test_update_replaces_whole_record(store, family, user):
    task = upsert_task(store, _draft(family, user, description="Whites", due_date=date(2024, 5, 1)))

    updated = upsert_task(store, _draft(family, user, id=task.id, title="Laundry (darks)", status=TaskStatus.DOING))

    assert updated.title == "Laundry (darks)"
    assert updated.status is TaskStatus.DOING
    assert updated.description is None
    assert updated.due_date is None


def test_update_of_missing_task_fails(store, family, user):
    with pytest.raises(NotFoundError):
        upsert_task(store, _draft(family, user, id="missing"))


def test_parent_must_exist_in_same_family(store, family, user):
    parent = upsert_task(store, _draft(family, user, title="Groceries"))
    child = upsert_task(store, _draft(family, user, title="Milk", parent_id=parent.id))

    assert child.parent_id == parent.id
    with pytest.raises(NotFoundError):
        upsert_task(store, _draft(family, user, title="Orphan", parent_id="nope"))
    with pytest.raises(NotFoundError):
        upsert_task(store, _draft(family, user, id=parent.id, parent_id=parent.id))


def test_tasks_are_scoped_to_family(store, family, user):
    task = upsert_task(store, _draft(family, user))

    assert get_tasks(store, "other-family") == []
    with pytest.raises(NotFoundError):
        get_task(store, "other-family", task.id)
    with pytest.raises(NotFoundError):
        delete_task(store, "other-family", task.id)


def test_delete_task(store, family, user):
    task = upsert_task(store, _draft(family, user))

    delete_task(store, family.id, task.id)

    assert get_tasks(store, family.id) == []
    with pytest.raises(NotFoundError):
        delete_task(store, family.id, task.id)
