"""Tests for family creation and lookup."""

from __future__ import annotations

import pytest

from famly.data.families import create_family, get_families_for_user, get_family, rename_family
from famly.errors import NotFoundError, PartialCompletionError, StoreError
from famly.models import FamilyRole
from tests.fakes import FailingStore


def test_create_family_makes_creator_owner(store, user):
    family, membership = create_family(store, "The Smiths", user.id)

    assert family.name == "The Smiths"
    assert membership.role is FamilyRole.OWNER
    memberships = get_families_for_user(store, user.id)
    assert [(m.family_id, m.role) for m in memberships] == [(family.id, FamilyRole.OWNER)]
    assert memberships[0].family.name == "The Smiths"


def test_create_family_rejects_blank_name(store, user):
    with pytest.raises(ValueError):
        create_family(store, "   ", user.id)


def test_failed_owner_insert_removes_family(store, user):
    failing = FailingStore(store, fail_on=[("family_members", "insert")])

    with pytest.raises(StoreError):
        create_family(failing, "The Smiths", user.id)

    assert store.select("families") == []
    assert ("families", "delete") in failing.calls


def test_failed_compensation_reports_partial_completion(store, user):
    failing = FailingStore(store, fail_on=[("family_members", "insert"), ("families", "delete")])

    with pytest.raises(PartialCompletionError) as excinfo:
        create_family(failing, "The Smiths", user.id)

    assert excinfo.value.completed == ["insert_family"]
    assert len(store.select("families")) == 1


def test_user_without_memberships_has_no_families(store, user):
    assert get_families_for_user(store, user.id) == []


def test_rename_and_get_family(store, family):
    renamed = rename_family(store, family.id, "  Smith Household ")

    assert renamed.name == "Smith Household"
    assert get_family(store, family.id).name == "Smith Household"
    with pytest.raises(NotFoundError):
        get_family(store, "missing")
