"""Task accessors."""

from __future__ import annotations

import logging
from typing import List

from famly.errors import NotFoundError
from famly.models.tasks import Task, TaskDraft
from famly.store.base import RemoteStore, Row

logger = logging.getLogger(__name__)

_TASK_COLUMNS = (
    "family_id",
    "title",
    "description",
    "due_date",
    "due_time",
    "assigned_to",
    "status",
    "parent_id",
    "created_by",
)


def task_from_row(row: Row) -> Task:
    return Task.model_validate(
        {
            "id": row["id"],
            "family_id": row["family_id"],
            "title": row["title"],
            "description": row.get("description"),
            "due_date": row.get("due_date"),
            "due_time": row.get("due_time"),
            "assigned_to": row.get("assigned_to"),
            "status": row.get("status") or "TODO",
            "parent_id": row.get("parent_id"),
            "created_by": row["created_by"],
            "created_at": row["created_at"],
        }
    )


def _draft_to_row(draft: TaskDraft) -> Row:
    payload = draft.model_dump(mode="json")
    return {column: payload.get(column) for column in _TASK_COLUMNS}


def get_tasks(store: RemoteStore, family_id: str) -> List[Task]:
    """Return every task of the family, unfiltered and unpaginated."""

    rows = store.select("tasks", {"family_id": family_id}, order_by="created_at")
    return [task_from_row(row) for row in rows]


def get_task(store: RemoteStore, family_id: str, task_id: str) -> Task:
    rows = store.select("tasks", {"id": task_id, "family_id": family_id})
    if not rows:
        raise NotFoundError(f"Task {task_id} not found")
    return task_from_row(rows[0])


def _check_parent(store: RemoteStore, draft: TaskDraft) -> None:
    if draft.parent_id is None:
        return
    if draft.id is not None and draft.parent_id == draft.id:
        raise NotFoundError("A task cannot be its own parent")
    if not store.select("tasks", {"id": draft.parent_id, "family_id": draft.family_id}):
        raise NotFoundError(f"Parent task {draft.parent_id} not found in family {draft.family_id}")


def upsert_task(store: RemoteStore, draft: TaskDraft) -> Task:
    """Create a task when ``draft.id`` is unset, otherwise replace the whole record.

    Replacement writes every column from the draft, so omitted optional fields
    are cleared rather than preserved.
    """

    _check_parent(store, draft)
    row = _draft_to_row(draft)

    if draft.id is None:
        if row["status"] is None:
            row.pop("status")
        created = task_from_row(store.insert("tasks", row))
        logger.debug("Created task %s in family %s", created.id, created.family_id)
        return created

    if row["status"] is None:
        row["status"] = "TODO"
    rows = store.update("tasks", row, {"id": draft.id, "family_id": draft.family_id})
    if not rows:
        raise NotFoundError(f"Task {draft.id} not found")
    return task_from_row(rows[0])


def delete_task(store: RemoteStore, family_id: str, task_id: str) -> None:
    """Delete exactly one task; sub-tasks are left for the caller to discard."""

    removed = store.delete("tasks", {"id": task_id, "family_id": family_id})
    if not removed:
        raise NotFoundError(f"Task {task_id} not found")


__all__ = ["task_from_row", "get_tasks", "get_task", "upsert_task", "delete_task"]
