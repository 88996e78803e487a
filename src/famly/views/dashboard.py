"""Home-screen summary combining tasks, events and members."""

from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from pydantic import Field

from famly.models.base import ViewModel
from famly.models.calendar import CalendarEvent
from famly.models.family import FamilyMember
from famly.models.tasks import Task

from .calendar import events_on
from .tasks import completed_count, is_overdue, next_up, tasks_due_on


class DashboardSummary(ViewModel):
    day: date
    total_tasks: int
    completed_tasks: int
    overdue_tasks: int
    member_count: int
    today_tasks: list[Task] = Field(default_factory=list)
    today_events: list[CalendarEvent] = Field(default_factory=list)
    next_up: Optional[Task] = Field(default=None)


def build_dashboard(
    tasks: Sequence[Task],
    events: Sequence[CalendarEvent],
    members: Sequence[FamilyMember],
    today: Optional[date] = None,
) -> DashboardSummary:
    day = today or date.today()
    return DashboardSummary(
        day=day,
        total_tasks=len(tasks),
        completed_tasks=completed_count(tasks),
        overdue_tasks=sum(1 for task in tasks if is_overdue(task, day)),
        member_count=len(members),
        today_tasks=tasks_due_on(tasks, day),
        today_events=events_on(events, day),
        next_up=next_up(tasks),
    )


__all__ = ["DashboardSummary", "build_dashboard"]
