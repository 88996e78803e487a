"""Invite accessors and the redemption sequence."""

from __future__ import annotations

import logging
import secrets
import string
from typing import List, Optional

from famly.errors import InviteNotFoundError, NotFoundError
from famly.models.family import FamilyInvite, FamilyMembership, FamilyRole, InviteLookup, InviteStatus
from famly.saga import Saga
from famly.store.base import RemoteStore, Row

from .families import membership_from_row

logger = logging.getLogger(__name__)

INVITE_CODE_LENGTH = 6
_CODE_ALPHABET = string.ascii_uppercase + string.digits


def generate_invite_code(length: int = INVITE_CODE_LENGTH) -> str:
    """Short code a person can type in by hand."""
    return "".join(secrets.choice(_CODE_ALPHABET) for _ in range(length))


def normalize_code(code: str) -> str:
    return code.strip().upper()


def invite_from_row(row: Row) -> FamilyInvite:
    return FamilyInvite.model_validate(
        {
            "id": row["id"],
            "family_id": row["family_id"],
            "email": row.get("email") or "",
            "invite_code": row["invite_code"],
            "role": row.get("role") or FamilyRole.MEMBER.value,
            "status": row["status"],
            "inviter_id": row["inviter_id"],
            "created_at": row["created_at"],
        }
    )


def create_invite(
    store: RemoteStore,
    family_id: str,
    email: str,
    role: FamilyRole,
    inviter_id: str,
) -> FamilyInvite:
    row = store.insert(
        "invites",
        {
            "family_id": family_id,
            "email": email.strip().lower(),
            "role": FamilyRole(role).value,
            "invite_code": generate_invite_code(),
            "status": InviteStatus.PENDING.value,
            "inviter_id": inviter_id,
        },
    )
    invite = invite_from_row(row)
    logger.info("Created invite %s for family %s", invite.id, family_id)
    return invite


def list_invites(store: RemoteStore, family_id: str) -> List[FamilyInvite]:
    rows = store.select("invites", {"family_id": family_id}, order_by="created_at", descending=True)
    return [invite_from_row(row) for row in rows]


def get_invite(store: RemoteStore, code: str) -> Optional[InviteLookup]:
    """Look up a PENDING invite by code; unknown and non-pending codes both give None."""

    rows = store.select(
        "invites", {"invite_code": normalize_code(code), "status": InviteStatus.PENDING.value}
    )
    if not rows:
        return None
    invite = invite_from_row(rows[0])
    families = store.select("families", {"id": invite.family_id})
    family_name = families[0]["name"] if families else None
    return InviteLookup(invite=invite, family_name=family_name)


def _set_status(store: RemoteStore, invite_id: str, status: InviteStatus, expected: InviteStatus) -> List[Row]:
    return store.update(
        "invites",
        {"status": status.value},
        {"id": invite_id, "status": expected.value},
    )


def redeem_invite(store: RemoteStore, code: str, user_id: str) -> FamilyMembership:
    """Accept the invite for ``user_id`` and grant the role the invite carries.

    The status change is conditional on the invite still being PENDING, so a
    second redemption of the same code fails with :class:`InviteNotFoundError`.
    If the membership insert fails, the invite is put back to PENDING.
    """

    lookup = get_invite(store, code)
    if lookup is None:
        raise InviteNotFoundError(normalize_code(code))
    invite = lookup.invite

    def accept() -> FamilyInvite:
        rows = _set_status(store, invite.id, InviteStatus.ACCEPTED, InviteStatus.PENDING)
        if not rows:
            raise InviteNotFoundError(invite.invite_code)
        return invite_from_row(rows[0])

    def reopen(_accepted: FamilyInvite) -> None:
        _set_status(store, invite.id, InviteStatus.PENDING, InviteStatus.ACCEPTED)

    def join() -> Row:
        return store.insert(
            "family_members",
            {"family_id": invite.family_id, "user_id": user_id, "role": invite.role.value},
        )

    saga = Saga("redeem_invite")
    saga.step("accept_invite", accept, reopen)
    saga.step("insert_membership", join)
    _, membership_row = saga.run()

    logger.info("User %s joined family %s via invite %s", user_id, invite.family_id, invite.id)
    return membership_from_row(membership_row)


def revoke_invite(store: RemoteStore, family_id: str, invite_id: str) -> FamilyInvite:
    """Move a PENDING invite to REVOKED; other statuses are terminal."""

    rows = store.update(
        "invites",
        {"status": InviteStatus.REVOKED.value},
        {"id": invite_id, "family_id": family_id, "status": InviteStatus.PENDING.value},
    )
    if not rows:
        raise NotFoundError(f"Pending invite {invite_id} not found")
    return invite_from_row(rows[0])


__all__ = [
    "INVITE_CODE_LENGTH",
    "generate_invite_code",
    "invite_from_row",
    "create_invite",
    "list_invites",
    "get_invite",
    "redeem_invite",
    "revoke_invite",
]
