"""Calendar event accessors."""

from __future__ import annotations

from typing import List

from famly.errors import NotFoundError
from famly.models.calendar import CalendarEvent, EventDraft
from famly.store.base import RemoteStore, Row


def event_from_row(row: Row) -> CalendarEvent:
    return CalendarEvent.model_validate(
        {
            "id": row["id"],
            "family_id": row["family_id"],
            "title": row["title"],
            "notes": row.get("notes"),
            "start_at": row["start_at"],
            "end_at": row.get("end_at"),
            "created_by": row["created_by"],
            "created_at": row["created_at"],
        }
    )


def _draft_to_row(draft: EventDraft) -> Row:
    payload = draft.model_dump(mode="json")
    return {
        "title": payload["title"],
        "notes": payload["notes"],
        "start_at": payload["start_at"],
        "end_at": payload["end_at"],
        "created_by": payload["created_by"],
    }


def get_events(store: RemoteStore, family_id: str) -> List[CalendarEvent]:
    rows = store.select("events", {"family_id": family_id}, order_by="start_at")
    return [event_from_row(row) for row in rows]


def create_event(store: RemoteStore, family_id: str, draft: EventDraft) -> CalendarEvent:
    row = _draft_to_row(draft)
    row["family_id"] = family_id
    return event_from_row(store.insert("events", row))


def update_event(store: RemoteStore, family_id: str, event_id: str, draft: EventDraft) -> CalendarEvent:
    rows = store.update("events", _draft_to_row(draft), {"id": event_id, "family_id": family_id})
    if not rows:
        raise NotFoundError(f"Event {event_id} not found")
    return event_from_row(rows[0])


def delete_event(store: RemoteStore, family_id: str, event_id: str) -> None:
    if not store.delete("events", {"id": event_id, "family_id": family_id}):
        raise NotFoundError(f"Event {event_id} not found")


__all__ = ["event_from_row", "get_events", "create_event", "update_event", "delete_event"]
