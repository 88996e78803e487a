"""Tests for calendar event persistence."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from famly.data.events import create_event, delete_event, get_events, update_event
from famly.errors import NotFoundError
from famly.models import EventDraft


def _draft(user, title="Dentist", hour=9, end_hour=None) -> EventDraft:
    start = datetime(2024, 5, 1, hour, tzinfo=timezone.utc)
    end = datetime(2024, 5, 1, end_hour, tzinfo=timezone.utc) if end_hour else None
    return EventDraft(title=title, start_at=start, end_at=end, created_by=user.id)


def test_events_are_ordered_by_start(store, family, user):
    create_event(store, family.id, _draft(user, "Late", hour=18))
    create_event(store, family.id, _draft(user, "Early", hour=8))

    assert [event.title for event in get_events(store, family.id)] == ["Early", "Late"]


def test_end_before_start_is_invalid(user):
    with pytest.raises(ValidationError):
        _draft(user, hour=10, end_hour=9)


def test_update_and_delete(store, family, user):
    event = create_event(store, family.id, _draft(user))

    updated = update_event(store, family.id, event.id, _draft(user, "Dentist (moved)", hour=11, end_hour=12))

    assert updated.title == "Dentist (moved)"
    assert updated.end_at.hour == 12
    delete_event(store, family.id, event.id)
    assert get_events(store, family.id) == []
    with pytest.raises(NotFoundError):
        delete_event(store, family.id, event.id)
