"""Calendar event models."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field, model_validator

from famly.models.base import ViewModel


class CalendarEvent(ViewModel):
    """Family calendar entry (no recurrence)."""

    id: str
    family_id: str
    title: str
    notes: Optional[str] = Field(default=None)
    start_at: datetime
    end_at: Optional[datetime] = Field(default=None)
    created_by: str
    created_at: datetime


class EventDraft(ViewModel):
    title: str = Field(min_length=1, max_length=255)
    notes: Optional[str] = Field(default=None, max_length=2000)
    start_at: datetime
    end_at: Optional[datetime] = Field(default=None)
    created_by: str

    @model_validator(mode="after")
    def check_end_after_start(self) -> "EventDraft":
        if self.end_at is not None and self.end_at < self.start_at:
            raise ValueError("end_at must not be earlier than start_at")
        return self


__all__ = ["CalendarEvent", "EventDraft"]
