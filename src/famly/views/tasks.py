"""Derived task views: filtering, grouping, next-up and status transitions.

All functions are pure and operate on the list fetched for one family; they
never call the store.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Dict, Iterable, List, Optional, Sequence, Set, Union

from famly.models.tasks import StatusFilter, Task, TaskNode, TaskStatus

ALL = "ALL"

_STATUS_CYCLE = {
    TaskStatus.TODO: TaskStatus.DOING,
    TaskStatus.DOING: TaskStatus.DONE,
    TaskStatus.DONE: TaskStatus.TODO,
}


def _children_by_parent(tasks: Iterable[Task]) -> Dict[str, List[Task]]:
    children: Dict[str, List[Task]] = defaultdict(list)
    for task in tasks:
        if task.parent_id is not None:
            children[task.parent_id].append(task)
    return children


def _subtree_ids(children: Dict[str, List[Task]], roots: Iterable[str]) -> Set[str]:
    reached: Set[str] = set()
    pending = list(roots)
    while pending:
        current = pending.pop()
        if current in reached:
            continue
        reached.add(current)
        pending.extend(child.id for child in children.get(current, []))
    return reached


def _mark_with_ancestors(by_id: Dict[str, Task], task: Task, marked: Set[str]) -> None:
    current: Optional[Task] = task
    while current is not None and current.id not in marked:
        marked.add(current.id)
        current = by_id.get(current.parent_id) if current.parent_id else None


def parse_status_filter(value: Union[str, TaskStatus, None]) -> StatusFilter:
    """Accept ``ALL`` (or nothing) and any status name, case-insensitively."""

    if value is None or (isinstance(value, str) and value.strip().upper() in {"", ALL}):
        return ALL
    if isinstance(value, TaskStatus):
        return value
    return TaskStatus(value.strip().upper())


def filter_tasks(
    tasks: Sequence[Task],
    status: StatusFilter = ALL,
    search: str = "",
) -> List[Task]:
    """Keep tasks whose status matches AND whose title matches the search.

    The title match propagates upwards: a task is kept when its own title or
    the title of any task nested beneath it contains the search term
    (case-insensitive). A sub-task is not kept just because its parent matches.
    Input order is preserved.
    """

    needle = search.strip().lower()
    title_hits: Optional[Set[str]] = None
    if needle:
        by_id = {task.id: task for task in tasks}
        title_hits = set()
        for task in tasks:
            if needle in task.title.lower():
                _mark_with_ancestors(by_id, task, title_hits)

    return [
        task
        for task in tasks
        if (status == ALL or task.status == status) and (title_hits is None or task.id in title_hits)
    ]


def with_ancestors(tasks: Sequence[Task], kept: Sequence[Task]) -> List[Task]:
    """``kept`` plus every ancestor of a kept task, in the order of ``tasks``.

    Ancestors are context for the tree: a DONE sub-task of an open parent
    stays reachable when filtering by DONE.
    """

    by_id = {task.id: task for task in tasks}
    wanted: Set[str] = set()
    for task in kept:
        _mark_with_ancestors(by_id, task, wanted)
    return [task for task in tasks if task.id in wanted]


def attached_tasks(tasks: Sequence[Task]) -> List[Task]:
    """Tasks reachable from a top-level task; sub-trees whose parent is gone are left out."""

    children = _children_by_parent(tasks)
    reachable = _subtree_ids(children, (task.id for task in tasks if task.parent_id is None))
    return [task for task in tasks if task.id in reachable]


def build_task_tree(tasks: Sequence[Task]) -> List[TaskNode]:
    """Group tasks under their parents.

    Top level holds only tasks without a parent. A task with a ``parent_id``
    appears solely in the sub-task list of that parent; when the parent is not
    part of ``tasks`` the task is not shown at all. Pass filtered lists through
    :func:`with_ancestors` first.
    """

    children = _children_by_parent(tasks)

    def node(task: Task) -> TaskNode:
        return TaskNode(task=task, subtasks=[node(child) for child in children.get(task.id, [])])

    return [node(task) for task in tasks if task.parent_id is None]


def next_up(tasks: Sequence[Task]) -> Optional[Task]:
    """Open task with the earliest due date; the first one wins on ties."""

    candidates = [task for task in tasks if task.due_date is not None and task.status != TaskStatus.DONE]
    if not candidates:
        return None
    return min(candidates, key=lambda task: task.due_date)


def is_overdue(task: Task, today: Optional[date] = None) -> bool:
    """Due strictly before ``today`` (same day is not overdue) and not done."""

    if task.due_date is None or task.status == TaskStatus.DONE:
        return False
    return task.due_date < (today or date.today())


def tasks_due_on(tasks: Sequence[Task], day: date) -> List[Task]:
    return [task for task in tasks if task.due_date == day]


def completed_count(tasks: Sequence[Task]) -> int:
    return sum(1 for task in tasks if task.status == TaskStatus.DONE)


def next_status(status: TaskStatus) -> TaskStatus:
    return _STATUS_CYCLE[TaskStatus(status)]


def apply_status_change(task: Task, status: TaskStatus, acting_user_id: str) -> Task:
    """Return ``task`` moved to ``status``.

    Moving into DOING assigns the task to the acting user when nobody holds it;
    every other transition leaves the assignment alone.
    """

    status = TaskStatus(status)
    changes: dict = {"status": status}
    if status == TaskStatus.DOING and task.assigned_to is None:
        changes["assigned_to"] = acting_user_id
    return task.model_copy(update=changes)


def discard_task(tasks: Sequence[Task], task_id: str) -> List[Task]:
    """Drop ``task_id`` and everything nested beneath it from a local list."""

    doomed = _subtree_ids(_children_by_parent(tasks), [task_id])
    return [task for task in tasks if task.id not in doomed]


__all__ = [
    "ALL",
    "parse_status_filter",
    "filter_tasks",
    "with_ancestors",
    "attached_tasks",
    "build_task_tree",
    "next_up",
    "is_overdue",
    "tasks_due_on",
    "completed_count",
    "next_status",
    "apply_status_change",
    "discard_task",
]
