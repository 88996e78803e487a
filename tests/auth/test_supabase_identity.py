"""Tests for the GoTrue-backed identity provider."""

from __future__ import annotations

import json
import time

import httpx
import pytest

from famly.auth import AuthEvent, EphemeralSessionStorage, SupabaseIdentityProvider
from famly.errors import AuthError
from famly.store.supabase import SupabaseStore

USER = {"id": "user-1", "email": "alice@example.com", "user_metadata": {"full_name": "Alice"}}


def _token_payload(access_token: str = "access-1", expires_in: int = 3600) -> dict:
    return {
        "access_token": access_token,
        "refresh_token": "refresh-1",
        "expires_at": int(time.time()) + expires_in,
        "user": USER,
    }


class Backend:
    """Routes auth and rest requests to canned responses."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.profiles: list[dict] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path == "/auth/v1/signup":
            return httpx.Response(200, json=_token_payload())
        if path == "/auth/v1/token":
            grant = request.url.params["grant_type"]
            body = json.loads(request.content)
            if grant == "password" and body["password"] != "secret123":
                return httpx.Response(400, json={"error_description": "Invalid login credentials"})
            token = "access-2" if grant == "refresh_token" else "access-1"
            return httpx.Response(200, json=_token_payload(token))
        if path == "/auth/v1/logout":
            return httpx.Response(204)
        if path == "/auth/v1/user":
            if request.headers["Authorization"] == "Bearer anon-key":
                return httpx.Response(401, json={"msg": "invalid JWT"})
            return httpx.Response(200, json=USER)
        if path == "/rest/v1/profiles":
            if request.method == "GET":
                return httpx.Response(200, json=[])
            payload = json.loads(request.content)
            self.profiles.extend(payload)
            return httpx.Response(201, json=payload)
        return httpx.Response(404, json={"message": "unexpected"})


@pytest.fixture()
def backend() -> Backend:
    return Backend()


@pytest.fixture()
def provider(backend):
    transport = httpx.MockTransport(backend)
    store = SupabaseStore("https://demo.supabase.co", "anon-key", transport=transport)
    return SupabaseIdentityProvider(
        "https://demo.supabase.co",
        "anon-key",
        store,
        transport=transport,
        storage=EphemeralSessionStorage(),
    )


def test_sign_up_stores_session_and_profile(provider, backend):
    session = provider.sign_up("alice@example.com", "secret123", "Alice")

    assert session is not None
    assert session.user.full_name == "Alice"
    assert backend.profiles == [
        {"id": "user-1", "email": "alice@example.com", "full_name": "Alice", "avatar_url": None}
    ]
    assert provider.current_session().access_token == "access-1"


def test_sign_up_awaiting_confirmation_returns_none(backend):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/auth/v1/signup":
            return httpx.Response(200, json=USER)
        return backend(request)

    transport = httpx.MockTransport(handler)
    store = SupabaseStore("https://demo.supabase.co", "anon-key", transport=transport)
    provider = SupabaseIdentityProvider(
        "https://demo.supabase.co", "anon-key", store, transport=transport, storage=EphemeralSessionStorage()
    )

    assert provider.sign_up("alice@example.com", "secret123", "Alice") is None
    assert not provider.is_authenticated()


def test_bad_credentials_raise_auth_error(provider):
    with pytest.raises(AuthError, match="Invalid login credentials"):
        provider.sign_in("alice@example.com", "wrong")


def test_sign_in_sets_store_token(provider, backend):
    provider.sign_in("alice@example.com", "secret123")
    provider._store.select("profiles", {"id": "user-1"})

    assert backend.requests[-1].headers["Authorization"] == "Bearer access-1"


def test_expired_session_is_refreshed(provider):
    events = []
    provider.on_auth_state_change(lambda event, session: events.append(event))
    session = provider.sign_in("alice@example.com", "secret123")
    expired = session.model_copy(update={"expires_at": session.expires_at.replace(year=2000)})
    provider._storage.save(expired)

    user = provider.get_current_user()

    assert user.id == "user-1"
    assert provider.current_session().access_token == "access-2"
    assert events == [AuthEvent.SIGNED_IN, AuthEvent.TOKEN_REFRESHED]


def test_sign_out_clears_session(provider, backend):
    provider.sign_in("alice@example.com", "secret123")

    provider.sign_out()

    assert provider.current_session() is None
    assert any(request.url.path == "/auth/v1/logout" for request in backend.requests)


def test_invalid_token_resolves_to_none(provider):
    assert provider.get_user("") is None
    assert provider.get_user("anon-key") is None
