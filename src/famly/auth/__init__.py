"""Session and identity providers."""

from __future__ import annotations

from typing import Optional

from famly.config import Settings, get_settings
from famly.store.base import RemoteStore

from .local import LocalIdentityProvider
from .session import (
    AuthEvent,
    AuthListener,
    AuthStateNotifier,
    EphemeralSessionStorage,
    IdentityProvider,
    SessionStorage,
    Subscription,
)
from .supabase import SupabaseIdentityProvider


def create_identity_provider(
    store: RemoteStore,
    settings: Optional[Settings] = None,
    *,
    storage: Optional[SessionStorage] = None,
) -> IdentityProvider:
    """Return the identity provider matching the configured backend.

    ``storage`` defaults to the persisted session marker; the HTTP layer passes
    an :class:`EphemeralSessionStorage` so callers' sessions never touch disk.
    """

    settings = settings or get_settings()
    if settings.uses_supabase:
        if not settings.supabase_url or not settings.supabase_anon_key:
            raise RuntimeError("FAMLY_SUPABASE_URL and FAMLY_SUPABASE_ANON_KEY must be set.")
        return SupabaseIdentityProvider(
            settings.supabase_url,
            settings.supabase_anon_key,
            store,
            timeout=settings.http_timeout,
            storage=storage,
        )
    return LocalIdentityProvider(store, storage=storage)


__all__ = [
    "AuthEvent",
    "AuthListener",
    "AuthStateNotifier",
    "EphemeralSessionStorage",
    "IdentityProvider",
    "SessionStorage",
    "Subscription",
    "LocalIdentityProvider",
    "SupabaseIdentityProvider",
    "create_identity_provider",
]
