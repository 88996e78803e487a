"""Identity, family, membership and invite models."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import Field

from famly.models.base import ViewModel


class FamilyRole(str, Enum):
    """Membership role, declared in descending order of privilege."""

    OWNER = "OWNER"
    ADMIN = "ADMIN"
    MEMBER = "MEMBER"
    VIEWER = "VIEWER"

    @property
    def rank(self) -> int:
        """Lower rank means more privilege (OWNER is 0)."""
        return list(FamilyRole).index(self)


class InviteStatus(str, Enum):
    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    REVOKED = "REVOKED"


class UserProfile(ViewModel):
    """Authenticated user identity plus display fields."""

    id: str
    email: str
    full_name: str = Field(default="")
    avatar_url: Optional[str] = Field(default=None)


class Family(ViewModel):
    """A household tenant; every other record is scoped to one."""

    id: str
    name: str
    avatar_url: Optional[str] = Field(default=None)
    created_at: datetime


class FamilyMembership(ViewModel):
    """Role-bearing link between a user and a family."""

    family_id: str
    user_id: str
    role: FamilyRole
    joined_at: Optional[datetime] = Field(default=None)
    family: Optional[Family] = Field(default=None)


class FamilyMember(ViewModel):
    """Membership joined with the member's profile, used for member listings."""

    family_id: str
    user_id: str
    role: FamilyRole
    joined_at: Optional[datetime] = Field(default=None)
    profile: Optional[UserProfile] = Field(default=None)


class FamilyInvite(ViewModel):
    """Redeemable, code-bearing offer of membership."""

    id: str
    family_id: str
    email: str
    invite_code: str
    role: FamilyRole = Field(default=FamilyRole.MEMBER)
    status: InviteStatus = Field(default=InviteStatus.PENDING)
    inviter_id: str
    created_at: datetime


class InviteLookup(ViewModel):
    """Pending invite together with the name of the family it grants access to."""

    invite: FamilyInvite
    family_name: Optional[str] = Field(default=None)


__all__ = [
    "FamilyRole",
    "InviteStatus",
    "UserProfile",
    "Family",
    "FamilyMembership",
    "FamilyMember",
    "FamilyInvite",
    "InviteLookup",
]
