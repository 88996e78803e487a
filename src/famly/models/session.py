"""Authentication session model."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import Field

from famly.models.base import ViewModel
from famly.models.family import UserProfile


class AuthSession(ViewModel):
    """Tokens issued by the identity provider for the signed-in user."""

    access_token: str
    refresh_token: Optional[str] = Field(default=None)
    expires_at: Optional[datetime] = Field(default=None)
    user: UserProfile


__all__ = ["AuthSession"]
