"""Tests for backend selection."""

from __future__ import annotations

import pytest

from famly.auth import LocalIdentityProvider, SupabaseIdentityProvider, create_identity_provider
from famly.config import get_settings
from famly.store import LocalStore, SupabaseStore, create_store


def test_local_backend_by_default():
    store = create_store()

    assert isinstance(store, LocalStore)
    assert isinstance(create_identity_provider(store), LocalIdentityProvider)


def test_supabase_backend_from_env(monkeypatch):
    monkeypatch.setenv("FAMLY_BACKEND", "supabase")
    monkeypatch.setenv("FAMLY_SUPABASE_URL", "https://demo.supabase.co")
    monkeypatch.setenv("FAMLY_SUPABASE_ANON_KEY", "anon")
    get_settings.cache_clear()

    store = create_store(access_token="user-token")
    provider = create_identity_provider(store)

    assert isinstance(store, SupabaseStore)
    assert isinstance(provider, SupabaseIdentityProvider)
    store.close()
    provider.close()


def test_supabase_backend_requires_credentials(monkeypatch):
    monkeypatch.setenv("FAMLY_BACKEND", "supabase")
    get_settings.cache_clear()

    with pytest.raises(RuntimeError):
        create_store()
