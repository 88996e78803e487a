"""Remote store backends and the factory choosing between them."""

from __future__ import annotations

from typing import Optional

from famly.config import Settings, get_settings

from .base import TABLES, Filters, RemoteStore, Row
from .local import LocalStore
from .supabase import SupabaseStore


def create_store(settings: Optional[Settings] = None, access_token: Optional[str] = None) -> RemoteStore:
    """Return the store configured by ``settings`` (hosted or local mock mode)."""

    settings = settings or get_settings()
    if settings.uses_supabase:
        if not settings.supabase_url or not settings.supabase_anon_key:
            raise RuntimeError("FAMLY_SUPABASE_URL and FAMLY_SUPABASE_ANON_KEY must be set.")
        return SupabaseStore(
            settings.supabase_url,
            settings.supabase_anon_key,
            access_token=access_token,
            timeout=settings.http_timeout,
        )
    return LocalStore()


__all__ = ["TABLES", "Filters", "Row", "RemoteStore", "LocalStore", "SupabaseStore", "create_store"]
