"""Tests for the home-screen summary."""

from __future__ import annotations

from datetime import date, datetime, timezone

from famly.models import CalendarEvent, FamilyMember, FamilyRole, TaskStatus
from famly.views.calendar import events_on, upcoming_events
from famly.views.dashboard import build_dashboard
from tests.fakes import make_task

TODAY = date(2024, 5, 10)


def _event(event_id: str, start: datetime, end: datetime | None = None) -> CalendarEvent:
    return CalendarEvent(
        id=event_id,
        family_id="fam",
        title=event_id,
        start_at=start,
        end_at=end,
        created_by="u1",
        created_at=start,
    )


def test_dashboard_counts():
    tasks = [
        make_task("t1", due_date=TODAY),
        make_task("t2", due_date=date(2024, 5, 1)),
        make_task("t3", status=TaskStatus.DONE, due_date=date(2024, 5, 1)),
    ]
    events = [
        _event("school run", datetime(2024, 5, 10, 8, tzinfo=timezone.utc)),
        _event("tomorrow", datetime(2024, 5, 11, 8, tzinfo=timezone.utc)),
    ]
    members = [FamilyMember(family_id="fam", user_id="u1", role=FamilyRole.OWNER)]

    summary = build_dashboard(tasks, events, members, today=TODAY)

    assert summary.total_tasks == 3
    assert summary.completed_tasks == 1
    assert summary.overdue_tasks == 1
    assert summary.member_count == 1
    assert [task.id for task in summary.today_tasks] == ["t1"]
    assert [event.id for event in summary.today_events] == ["school run"]
    assert summary.next_up.id == "t2"
    assert summary.to_view()["totalTasks"] == 3


def test_upcoming_events_skip_finished_and_respect_limit():
    now = datetime(2024, 5, 10, 12, tzinfo=timezone.utc)
    events = [
        _event("past", datetime(2024, 5, 10, 8, tzinfo=timezone.utc), datetime(2024, 5, 10, 9, tzinfo=timezone.utc)),
        _event("ongoing", datetime(2024, 5, 10, 11, tzinfo=timezone.utc), datetime(2024, 5, 10, 13, tzinfo=timezone.utc)),
        _event("later", datetime(2024, 5, 12, 8, tzinfo=timezone.utc)),
        _event("soon", datetime(2024, 5, 11, 8, tzinfo=timezone.utc)),
    ]

    assert [event.id for event in upcoming_events(events, now=now, limit=2)] == ["ongoing", "soon"]
    assert [event.id for event in events_on(events, date(2024, 5, 12))] == ["later"]
