"""Tests for invite creation, lookup and redemption."""

from __future__ import annotations

import pytest

from famly.data.families import get_families_for_user
from famly.data.invites import (
    create_invite,
    generate_invite_code,
    get_invite,
    list_invites,
    redeem_invite,
    revoke_invite,
)
from famly.errors import ConflictError, InviteNotFoundError, NotFoundError, StoreError
from famly.models import FamilyRole, InviteStatus
from tests.fakes import FailingStore


@pytest.fixture()
def bob(identity):
    return identity.sign_up("bob@example.com", "secret123", "Bob").user


def _seed_invite(store, family, inviter_id, code="ABC123", role=FamilyRole.MEMBER):
    return store.insert(
        "invites",
        {
            "family_id": family.id,
            "email": "bob@example.com",
            "invite_code": code,
            "role": role.value,
            "inviter_id": inviter_id,
        },
    )


def test_generated_codes_are_six_uppercase_alphanumerics():
    code = generate_invite_code()

    assert len(code) == 6
    assert code == code.upper()
    assert code.isalnum()


def test_create_invite_is_pending(store, family, user):
    invite = create_invite(store, family.id, " Bob@Example.com ", FamilyRole.ADMIN, user.id)

    assert invite.status is InviteStatus.PENDING
    assert invite.email == "bob@example.com"
    assert invite.role is FamilyRole.ADMIN
    assert [entry.id for entry in list_invites(store, family.id)] == [invite.id]


def test_get_invite_includes_family_name(store, family, user):
    _seed_invite(store, family, user.id)

    lookup = get_invite(store, "abc123")

    assert lookup.family_name == "The Smiths"
    assert get_invite(store, "ZZZ999") is None


def test_redeem_joins_family_once(store, family, user, bob):
    _seed_invite(store, family, user.id)

    membership = redeem_invite(store, "ABC123", bob.id)

    assert membership.family_id == family.id
    assert membership.role is FamilyRole.MEMBER
    assert [m.family_id for m in get_families_for_user(store, bob.id)] == [family.id]
    assert store.select("invites", {"invite_code": "ABC123"})[0]["status"] == "ACCEPTED"

    with pytest.raises(InviteNotFoundError):
        redeem_invite(store, "ABC123", bob.id)


def test_redeem_grants_the_invited_role(store, family, user, bob):
    _seed_invite(store, family, user.id, role=FamilyRole.ADMIN)

    assert redeem_invite(store, "ABC123", bob.id).role is FamilyRole.ADMIN


def test_failed_membership_insert_reopens_invite(store, family, user, bob):
    _seed_invite(store, family, user.id)
    failing = FailingStore(store, fail_on=[("family_members", "insert")])

    with pytest.raises(StoreError):
        redeem_invite(failing, "ABC123", bob.id)

    assert store.select("invites", {"invite_code": "ABC123"})[0]["status"] == "PENDING"
    assert redeem_invite(store, "ABC123", bob.id).family_id == family.id


def test_existing_member_redeeming_gets_conflict_and_invite_stays_pending(store, family, user):
    _seed_invite(store, family, user.id)

    with pytest.raises(ConflictError):
        redeem_invite(store, "ABC123", user.id)

    assert get_invite(store, "ABC123") is not None


def test_revoke_only_pending(store, family, user, bob):
    invite = create_invite(store, family.id, "bob@example.com", FamilyRole.MEMBER, user.id)

    revoked = revoke_invite(store, family.id, invite.id)

    assert revoked.status is InviteStatus.REVOKED
    assert get_invite(store, invite.invite_code) is None
    with pytest.raises(NotFoundError):
        revoke_invite(store, family.id, invite.id)
