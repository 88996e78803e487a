"""Shared pytest fixtures for the Famly test suite."""

from __future__ import annotations

from typing import Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from famly.auth import EphemeralSessionStorage, LocalIdentityProvider
from famly.config import get_settings
from famly.data.families import create_family
from famly.db.engine import dispose_engines
from famly.models import Family, UserProfile
from famly.server.app import create_app
from famly.store import LocalStore


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Ensure each test uses an isolated SQLite file and the local backend."""

    db_path = tmp_path / "test_famly.db"
    monkeypatch.setenv("FAMLY_DATABASE_PATH", str(db_path))
    monkeypatch.setenv("FAMLY_BACKEND", "local")
    for key in ("FAMLY_SUPABASE_URL", "FAMLY_SUPABASE_ANON_KEY", "FAMLY_CURRENCY_SYMBOL"):
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    dispose_engines()
    yield
    dispose_engines()
    get_settings.cache_clear()


@pytest.fixture()
def app() -> Generator[FastAPI, None, None]:
    """Create a new FastAPI app instance for each test and reset overrides."""

    application = create_app()
    yield application
    application.dependency_overrides.clear()


@pytest.fixture()
def client(app) -> TestClient:
    """Return a test client bound to the FastAPI app."""

    return TestClient(app)


@pytest.fixture()
def store() -> LocalStore:
    return LocalStore()


@pytest.fixture()
def identity(store) -> LocalIdentityProvider:
    return LocalIdentityProvider(store, storage=EphemeralSessionStorage())


@pytest.fixture()
def user(identity) -> UserProfile:
    """A freshly signed-up account."""

    return identity.sign_up("alice@example.com", "secret123", "Alice Smith").user


@pytest.fixture()
def family(store, user) -> Family:
    created, _ = create_family(store, "The Smiths", user.id)
    return created
