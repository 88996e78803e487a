"""Task models."""

from __future__ import annotations

from datetime import date, datetime, time
from enum import Enum
from typing import Literal, Optional, Union

from pydantic import Field

from famly.models.base import ViewModel


class TaskStatus(str, Enum):
    TODO = "TODO"
    DOING = "DOING"
    DONE = "DONE"


StatusFilter = Union[Literal["ALL"], TaskStatus]


class Task(ViewModel):
    """Household task; ``parent_id`` links a sub-task to its parent."""

    id: str
    family_id: str
    title: str
    description: Optional[str] = Field(default=None)
    due_date: Optional[date] = Field(default=None)
    due_time: Optional[time] = Field(default=None)
    assigned_to: Optional[str] = Field(default=None)
    status: TaskStatus = Field(default=TaskStatus.TODO)
    parent_id: Optional[str] = Field(default=None)
    created_by: str
    created_at: datetime


class TaskDraft(ViewModel):
    """Input for task upserts; a missing ``id`` creates a new task."""

    id: Optional[str] = Field(default=None)
    family_id: str
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=2000)
    due_date: Optional[date] = Field(default=None)
    due_time: Optional[time] = Field(default=None)
    assigned_to: Optional[str] = Field(default=None)
    status: Optional[TaskStatus] = Field(default=None)
    parent_id: Optional[str] = Field(default=None)
    created_by: str

    @classmethod
    def from_task(cls, task: Task, **changes) -> "TaskDraft":
        """Build a whole-record draft from an existing task with optional changes."""

        payload = task.model_dump(exclude={"created_at"})
        payload.update(changes)
        return cls.model_validate(payload)


class TaskNode(ViewModel):
    """Task together with the sub-tasks grouped beneath it."""

    task: Task
    subtasks: list["TaskNode"] = Field(default_factory=list)


__all__ = ["TaskStatus", "StatusFilter", "Task", "TaskDraft", "TaskNode"]
