"""Calendar event views."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import List, Optional, Sequence

from famly.models.calendar import CalendarEvent


def _as_aware(moment: datetime) -> datetime:
    return moment if moment.tzinfo is not None else moment.replace(tzinfo=timezone.utc)


def events_on(events: Sequence[CalendarEvent], day: date) -> List[CalendarEvent]:
    """Events starting on ``day`` (by the start's own calendar date)."""

    return [event for event in events if event.start_at.date() == day]


def upcoming_events(
    events: Sequence[CalendarEvent],
    now: Optional[datetime] = None,
    limit: int = 5,
) -> List[CalendarEvent]:
    """Events not yet finished, soonest first."""

    current = _as_aware(now or datetime.now(timezone.utc))
    pending = [
        event
        for event in events
        if _as_aware(event.end_at or event.start_at) >= current
    ]
    pending.sort(key=lambda event: _as_aware(event.start_at))
    return pending[:limit]


__all__ = ["events_on", "upcoming_events"]
