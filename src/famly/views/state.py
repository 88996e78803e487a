"""Per-view in-memory state with optimistic updates.

A board holds the list fetched for one view instance. Mutations apply the
change locally first, call the store, and on failure put back the value held
before the call. Every mutation returns a :class:`~famly.results.Result`.
"""

from __future__ import annotations

import logging
from datetime import date, time
from typing import List, Optional

from famly.data import shopping as shopping_data
from famly.data import tasks as task_data
from famly.errors import NotFoundError
from famly.models.shopping import ShoppingItem
from famly.models.tasks import StatusFilter, Task, TaskDraft, TaskNode, TaskStatus
from famly.results import Err, Result, attempt
from famly.store.base import RemoteStore

from . import tasks as task_views

logger = logging.getLogger(__name__)


def _replace(items: list, updated) -> list:
    return [updated if item.id == updated.id else item for item in items]


class TaskBoard:
    """Tasks of one family as seen by one user."""

    def __init__(self, store: RemoteStore, family_id: str, user_id: str) -> None:
        self._store = store
        self.family_id = family_id
        self.user_id = user_id
        self.tasks: List[Task] = []

    def refresh(self) -> Result[List[Task]]:
        """Reload the family's tasks, leaving out sub-tasks whose parent was deleted."""

        result = attempt(task_data.get_tasks, self._store, self.family_id)
        if result.ok:
            self.tasks = task_views.attached_tasks(result.value)
            if len(self.tasks) != len(result.value):
                logger.debug(
                    "Ignoring %d orphaned task(s) in family %s",
                    len(result.value) - len(self.tasks),
                    self.family_id,
                )
        return result

    def find(self, task_id: str) -> Optional[Task]:
        return next((task for task in self.tasks if task.id == task_id), None)

    def add(
        self,
        title: str,
        *,
        due_date: Optional[date] = None,
        due_time: Optional[time] = None,
        parent_id: Optional[str] = None,
        description: Optional[str] = None,
        assigned_to: Optional[str] = None,
        status: TaskStatus = TaskStatus.TODO,
    ) -> Result[Task]:
        if status == TaskStatus.DOING and assigned_to is None:
            assigned_to = self.user_id
        draft = TaskDraft(
            family_id=self.family_id,
            title=title,
            due_date=due_date,
            due_time=due_time,
            parent_id=parent_id,
            description=description,
            assigned_to=assigned_to,
            status=status,
            created_by=self.user_id,
        )
        result = attempt(task_data.upsert_task, self._store, draft)
        if result.ok:
            self.tasks = [result.value, *self.tasks]
        return result

    def set_status(self, task_id: str, status: TaskStatus) -> Result[Task]:
        previous = self.find(task_id)
        if previous is None:
            return Err(NotFoundError(f"Task {task_id} not found"))

        optimistic = task_views.apply_status_change(previous, status, self.user_id)
        self.tasks = _replace(self.tasks, optimistic)

        result = attempt(task_data.upsert_task, self._store, TaskDraft.from_task(optimistic))
        if result.ok:
            self.tasks = _replace(self.tasks, result.value)
        else:
            logger.info("Rolling back status change of task %s", task_id)
            self.tasks = _replace(self.tasks, previous)
        return result

    def cycle_status(self, task_id: str) -> Result[Task]:
        """Advance TODO -> DOING -> DONE -> TODO."""

        current = self.find(task_id)
        if current is None:
            return Err(NotFoundError(f"Task {task_id} not found"))
        return self.set_status(task_id, task_views.next_status(current.status))

    def delete(self, task_id: str) -> Result[None]:
        result = attempt(task_data.delete_task, self._store, self.family_id, task_id)
        if result.ok:
            self.tasks = task_views.discard_task(self.tasks, task_id)
        return result

    def view(self, status: StatusFilter = task_views.ALL, search: str = "") -> List[TaskNode]:
        """Filtered tree; parents of matching sub-tasks are kept as context."""

        kept = task_views.filter_tasks(self.tasks, status, search)
        return task_views.build_task_tree(task_views.with_ancestors(self.tasks, kept))

    def next_up(self) -> Optional[Task]:
        return task_views.next_up(self.tasks)


class ShoppingBoard:
    """Items of one shopping list."""

    def __init__(self, store: RemoteStore, list_id: str) -> None:
        self._store = store
        self.list_id = list_id
        self.items: List[ShoppingItem] = []

    def refresh(self) -> Result[List[ShoppingItem]]:
        result = attempt(shopping_data.get_shopping_items, self._store, self.list_id)
        if result.ok:
            self.items = list(result.value)
        return result

    def add(self, title: str) -> Result[ShoppingItem]:
        result = attempt(shopping_data.add_shopping_item, self._store, self.list_id, title)
        if result.ok:
            self.items = [*self.items, result.value]
        return result

    def toggle(self, item_id: str) -> Result[ShoppingItem]:
        previous = next((item for item in self.items if item.id == item_id), None)
        if previous is None:
            return Err(NotFoundError(f"Shopping item {item_id} not found"))

        self.items = _replace(self.items, previous.model_copy(update={"is_done": not previous.is_done}))
        result = attempt(shopping_data.toggle_shopping_item, self._store, item_id, not previous.is_done)
        if result.ok:
            self.items = _replace(self.items, result.value)
        else:
            logger.info("Rolling back toggle of shopping item %s", item_id)
            self.items = _replace(self.items, previous)
        return result

    def delete(self, item_id: str) -> Result[None]:
        result = attempt(shopping_data.delete_shopping_item, self._store, item_id)
        if result.ok:
            self.items = [item for item in self.items if item.id != item_id]
        return result

    @property
    def remaining(self) -> int:
        return sum(1 for item in self.items if not item.is_done)


__all__ = ["TaskBoard", "ShoppingBoard"]
