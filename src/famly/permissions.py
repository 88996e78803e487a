"""Role-based permissions for family members."""

from __future__ import annotations

from typing import Dict, FrozenSet, Union

from famly.errors import PermissionDeniedError
from famly.models.family import FamilyRole

MANAGE_MEMBERS = "manage_members"
MANAGE_SETTINGS = "manage_settings"
CREATE_CONTENT = "create_content"
EDIT_CONTENT = "edit_content"
DELETE_CONTENT = "delete_content"
INVITE_MEMBERS = "invite_members"

ROLE_PERMISSIONS: Dict[FamilyRole, FrozenSet[str]] = {
    FamilyRole.OWNER: frozenset(
        {MANAGE_MEMBERS, MANAGE_SETTINGS, CREATE_CONTENT, EDIT_CONTENT, DELETE_CONTENT, INVITE_MEMBERS}
    ),
    FamilyRole.ADMIN: frozenset(
        {MANAGE_MEMBERS, CREATE_CONTENT, EDIT_CONTENT, DELETE_CONTENT, INVITE_MEMBERS}
    ),
    FamilyRole.MEMBER: frozenset({CREATE_CONTENT, EDIT_CONTENT}),
    FamilyRole.VIEWER: frozenset(),
}


def _coerce_role(role: Union[FamilyRole, str]) -> FamilyRole | None:
    try:
        return FamilyRole(role)
    except ValueError:
        return None


def can(role: Union[FamilyRole, str], action: str) -> bool:
    """Return True when ``role`` grants ``action``; unknown roles grant nothing."""

    resolved = _coerce_role(role)
    if resolved is None:
        return False
    return action in ROLE_PERMISSIONS[resolved]


def require(role: Union[FamilyRole, str], action: str) -> None:
    if not can(role, action):
        raise PermissionDeniedError(f"Role {role} is not allowed to {action.replace('_', ' ')}")


def outranks(role: FamilyRole, other: FamilyRole) -> bool:
    """True when ``role`` is strictly more privileged than ``other``."""

    return role.rank < other.rank


__all__ = [
    "MANAGE_MEMBERS",
    "MANAGE_SETTINGS",
    "CREATE_CONTENT",
    "EDIT_CONTENT",
    "DELETE_CONTENT",
    "INVITE_MEMBERS",
    "ROLE_PERMISSIONS",
    "can",
    "require",
    "outranks",
]
