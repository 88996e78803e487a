"""Profile accessors."""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from famly.models.family import UserProfile
from famly.store.base import RemoteStore, Row


def profile_from_row(row: Row) -> UserProfile:
    return UserProfile.model_validate(
        {
            "id": row["id"],
            "email": row.get("email") or "",
            "full_name": row.get("full_name") or "",
            "avatar_url": row.get("avatar_url"),
        }
    )


def get_profile(store: RemoteStore, user_id: str) -> Optional[UserProfile]:
    rows = store.select("profiles", {"id": user_id})
    return profile_from_row(rows[0]) if rows else None


def get_profiles(store: RemoteStore, user_ids: Sequence[str]) -> Dict[str, UserProfile]:
    """Return profiles keyed by user id; unknown ids are simply absent."""

    if not user_ids:
        return {}
    rows: List[Row] = store.select("profiles", {"id": list(dict.fromkeys(user_ids))})
    return {row["id"]: profile_from_row(row) for row in rows}


def upsert_profile(store: RemoteStore, profile: UserProfile) -> UserProfile:
    """Insert the profile, or overwrite the display fields when it already exists."""

    row = {
        "id": profile.id,
        "email": profile.email,
        "full_name": profile.full_name,
        "avatar_url": profile.avatar_url,
    }
    if store.select("profiles", {"id": profile.id}):
        updated = store.update("profiles", row, {"id": profile.id})
        return profile_from_row(updated[0]) if updated else profile
    return profile_from_row(store.insert("profiles", row))


__all__ = ["profile_from_row", "get_profile", "get_profiles", "upsert_profile"]
