"""Family (tenant) accessors."""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from famly.errors import NotFoundError
from famly.models.family import Family, FamilyMembership, FamilyRole
from famly.saga import Saga
from famly.store.base import RemoteStore, Row

logger = logging.getLogger(__name__)


def family_from_row(row: Row) -> Family:
    return Family.model_validate(
        {
            "id": row["id"],
            "name": row["name"],
            "avatar_url": row.get("avatar_url"),
            "created_at": row["created_at"],
        }
    )


def membership_from_row(row: Row, family: Optional[Family] = None) -> FamilyMembership:
    return FamilyMembership.model_validate(
        {
            "family_id": row["family_id"],
            "user_id": row["user_id"],
            "role": row["role"],
            "joined_at": row.get("joined_at"),
            "family": family,
        }
    )


def get_family(store: RemoteStore, family_id: str) -> Family:
    rows = store.select("families", {"id": family_id})
    if not rows:
        raise NotFoundError(f"Family {family_id} not found")
    return family_from_row(rows[0])


def get_families_for_user(store: RemoteStore, user_id: str) -> List[FamilyMembership]:
    """Return the user's memberships with the family embedded, in store order."""

    memberships = store.select("family_members", {"user_id": user_id})
    if not memberships:
        return []
    family_ids = [row["family_id"] for row in memberships]
    families = {row["id"]: family_from_row(row) for row in store.select("families", {"id": family_ids})}
    result: List[FamilyMembership] = []
    for row in memberships:
        family = families.get(row["family_id"])
        if family is None:
            logger.warning(
                "Membership of user %s references missing family %s", user_id, row["family_id"]
            )
        result.append(membership_from_row(row, family))
    return result


def create_family(store: RemoteStore, name: str, user_id: str) -> Tuple[Family, FamilyMembership]:
    """Create a family and make ``user_id`` its first OWNER.

    The two writes are not atomic on the store; if the membership insert fails
    the family row is deleted again before the error propagates.
    """

    cleaned = name.strip()
    if not cleaned:
        raise ValueError("Family name must not be empty")

    state: dict = {}

    def insert_family() -> Row:
        row = store.insert("families", {"name": cleaned})
        state["family"] = row
        return row

    def insert_owner() -> Row:
        return store.insert(
            "family_members",
            {"family_id": state["family"]["id"], "user_id": user_id, "role": FamilyRole.OWNER.value},
        )

    saga = Saga("create_family")
    saga.step("insert_family", insert_family, lambda row: store.delete("families", {"id": row["id"]}))
    saga.step("insert_owner_membership", insert_owner)
    family_row, membership_row = saga.run()

    family = family_from_row(family_row)
    logger.info("Created family %s for user %s", family.id, user_id)
    return family, membership_from_row(membership_row, family)


def rename_family(store: RemoteStore, family_id: str, name: str) -> Family:
    cleaned = name.strip()
    if not cleaned:
        raise ValueError("Family name must not be empty")
    rows = store.update("families", {"name": cleaned}, {"id": family_id})
    if not rows:
        raise NotFoundError(f"Family {family_id} not found")
    return family_from_row(rows[0])


__all__ = [
    "family_from_row",
    "membership_from_row",
    "get_family",
    "get_families_for_user",
    "create_family",
    "rename_family",
]
