"""Active-family tracking for a signed-in user."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from famly.errors import NotFoundError
from famly.models.family import Family, FamilyMembership, FamilyRole, UserProfile

logger = logging.getLogger(__name__)


@dataclass
class FamilyContext:
    """The user's memberships plus which family is active for this session.

    Switching families is a local change only; nothing is written to the store.
    """

    user: UserProfile
    memberships: List[FamilyMembership] = field(default_factory=list)
    active_family_id: Optional[str] = None

    def __post_init__(self) -> None:
        if self.active_family_id is not None and self._find(self.active_family_id) is None:
            logger.info(
                "Previously selected family %s is no longer available; falling back",
                self.active_family_id,
            )
            self.active_family_id = None
        if self.active_family_id is None and self.memberships:
            self.active_family_id = self.memberships[0].family_id

    def _find(self, family_id: str) -> Optional[FamilyMembership]:
        for membership in self.memberships:
            if membership.family_id == family_id:
                return membership
        return None

    @property
    def has_family(self) -> bool:
        return self.active_family_id is not None

    @property
    def active_membership(self) -> FamilyMembership:
        if self.active_family_id is None:
            raise NotFoundError("No active family; create or join one first")
        membership = self._find(self.active_family_id)
        assert membership is not None
        return membership

    @property
    def active_family(self) -> Optional[Family]:
        return self.active_membership.family

    @property
    def family_id(self) -> str:
        return self.active_membership.family_id

    @property
    def role(self) -> FamilyRole:
        return self.active_membership.role

    def select(self, family_id: str) -> FamilyMembership:
        """Make ``family_id`` the active family."""

        membership = self._find(family_id)
        if membership is None:
            raise NotFoundError(f"Family {family_id} not found for user {self.user.id}")
        self.active_family_id = family_id
        return membership

    def add(self, membership: FamilyMembership, *, activate: bool = True) -> None:
        """Track a newly created or joined membership."""

        if self._find(membership.family_id) is None:
            self.memberships.append(membership)
        if activate or self.active_family_id is None:
            self.active_family_id = membership.family_id


__all__ = ["FamilyContext"]
