"""Tests for the mock-mode identity provider."""

from __future__ import annotations

import pytest

from famly.auth import AuthEvent, LocalIdentityProvider, SessionStorage
from famly.data.profiles import get_profile
from famly.errors import AuthError


def test_sign_up_creates_profile_and_session(identity, store):
    session = identity.sign_up("Bob@Example.com", "secret123", "Bob Jones")

    assert session.user.email == "bob@example.com"
    assert session.access_token
    profile = get_profile(store, session.user.id)
    assert profile is not None
    assert profile.full_name == "Bob Jones"
    assert identity.is_authenticated()


def test_sign_up_rejects_duplicates_and_short_passwords(identity):
    identity.sign_up("bob@example.com", "secret123", "Bob")

    with pytest.raises(AuthError, match="already registered"):
        identity.sign_up("bob@example.com", "other123", "Bob")
    with pytest.raises(AuthError, match="at least 6"):
        identity.sign_up("carol@example.com", "123", "Carol")


def test_sign_in_with_wrong_password_fails(identity):
    identity.sign_up("bob@example.com", "secret123", "Bob")

    with pytest.raises(AuthError, match="Invalid login credentials"):
        identity.sign_in("bob@example.com", "wrong-password")


def test_tokens_resolve_until_sign_out(identity):
    identity.sign_up("bob@example.com", "secret123", "Bob")
    session = identity.sign_in("bob@example.com", "secret123")

    assert identity.get_user(session.access_token).email == "bob@example.com"
    assert identity.get_current_user().id == session.user.id

    identity.sign_out()

    assert identity.get_user(session.access_token) is None
    assert identity.get_current_user() is None
    assert not identity.is_authenticated()


def test_events_are_emitted_to_subscribers(identity):
    events = []
    subscription = identity.on_auth_state_change(lambda event, session: events.append(event))

    identity.sign_up("bob@example.com", "secret123", "Bob")
    identity.sign_out()
    subscription.unsubscribe()
    identity.sign_in("bob@example.com", "secret123")

    assert events == [AuthEvent.SIGNED_IN, AuthEvent.SIGNED_OUT]


def test_persisted_session_is_seen_by_a_new_provider(store):
    LocalIdentityProvider(store).sign_up("bob@example.com", "secret123", "Bob")

    assert SessionStorage().load() is not None
    assert LocalIdentityProvider(store).get_current_user().email == "bob@example.com"
