"""Membership accessors."""

from __future__ import annotations

import logging
from typing import List

from famly.errors import NotFoundError, PermissionDeniedError
from famly.models.family import FamilyMember, FamilyMembership, FamilyRole
from famly.store.base import RemoteStore, Row

from .families import membership_from_row
from .profiles import get_profiles

logger = logging.getLogger(__name__)


def list_family_members(store: RemoteStore, family_id: str) -> List[FamilyMember]:
    """Return the family's memberships joined with member profiles."""

    rows = store.select("family_members", {"family_id": family_id}, order_by="joined_at")
    profiles = get_profiles(store, [row["user_id"] for row in rows])
    return [
        FamilyMember.model_validate(
            {
                "family_id": row["family_id"],
                "user_id": row["user_id"],
                "role": row["role"],
                "joined_at": row.get("joined_at"),
                "profile": profiles.get(row["user_id"]),
            }
        )
        for row in rows
    ]


def get_membership(store: RemoteStore, family_id: str, user_id: str) -> FamilyMembership:
    rows = store.select("family_members", {"family_id": family_id, "user_id": user_id})
    if not rows:
        raise NotFoundError(f"User {user_id} is not a member of family {family_id}")
    return membership_from_row(rows[0])


def add_family_member(
    store: RemoteStore,
    family_id: str,
    user_id: str,
    role: FamilyRole = FamilyRole.MEMBER,
) -> FamilyMembership:
    """Insert a membership; a duplicate raises :class:`~famly.errors.ConflictError`."""

    row = store.insert(
        "family_members",
        {"family_id": family_id, "user_id": user_id, "role": FamilyRole(role).value},
    )
    logger.info("Added user %s to family %s as %s", user_id, family_id, row["role"])
    return membership_from_row(row)


def _owner_count(rows: List[Row]) -> int:
    return sum(1 for row in rows if row["role"] == FamilyRole.OWNER.value)


def _guard_last_owner(store: RemoteStore, family_id: str, user_id: str) -> None:
    rows = store.select("family_members", {"family_id": family_id})
    target = next((row for row in rows if row["user_id"] == user_id), None)
    if target is None:
        raise NotFoundError(f"User {user_id} is not a member of family {family_id}")
    if target["role"] == FamilyRole.OWNER.value and _owner_count(rows) <= 1:
        raise PermissionDeniedError("A family must keep at least one owner")


def update_member_role(
    store: RemoteStore, family_id: str, user_id: str, role: FamilyRole
) -> FamilyMembership:
    role = FamilyRole(role)
    if role is not FamilyRole.OWNER:
        _guard_last_owner(store, family_id, user_id)
    rows = store.update(
        "family_members", {"role": role.value}, {"family_id": family_id, "user_id": user_id}
    )
    if not rows:
        raise NotFoundError(f"User {user_id} is not a member of family {family_id}")
    return membership_from_row(rows[0])


def remove_family_member(store: RemoteStore, family_id: str, user_id: str) -> None:
    _guard_last_owner(store, family_id, user_id)
    store.delete("family_members", {"family_id": family_id, "user_id": user_id})
    logger.info("Removed user %s from family %s", user_id, family_id)


__all__ = [
    "list_family_members",
    "get_membership",
    "add_family_member",
    "update_member_role",
    "remove_family_member",
]
