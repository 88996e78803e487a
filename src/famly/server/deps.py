"""Dependency definitions for the Famly API server."""

from __future__ import annotations

import logging
from typing import Callable, Generator, Optional

from fastapi import Depends, Header, HTTPException, Request, status

from famly import permissions
from famly.auth import (
    EphemeralSessionStorage,
    IdentityProvider,
    SupabaseIdentityProvider,
    create_identity_provider,
)
from famly.config import Settings, get_settings
from famly.data.families import get_families_for_user
from famly.models.family import UserProfile
from famly.store import RemoteStore, SupabaseStore, create_store
from famly.tenancy import FamilyContext

logger = logging.getLogger(__name__)


def bearer_token(request: Request) -> Optional[str]:
    """Extract the bearer token from the Authorization header, if present."""

    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.lower().startswith("bearer "):
        return None
    token = auth_header[len("bearer ") :].strip()
    return token or None


def get_store(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> Generator[RemoteStore, None, None]:
    """Store scoped to the caller's token so row-level security applies."""

    store = create_store(settings, access_token=bearer_token(request))
    try:
        yield store
    finally:
        if isinstance(store, SupabaseStore):
            store.close()


def get_session_storage() -> EphemeralSessionStorage:
    return EphemeralSessionStorage()


def get_identity_provider(
    store: RemoteStore = Depends(get_store),
    storage: EphemeralSessionStorage = Depends(get_session_storage),
    settings: Settings = Depends(get_settings),
) -> Generator[IdentityProvider, None, None]:
    provider = create_identity_provider(store, settings, storage=storage)
    try:
        yield provider
    finally:
        if isinstance(provider, SupabaseIdentityProvider):
            provider.close()


def get_current_user(
    request: Request,
    provider: IdentityProvider = Depends(get_identity_provider),
) -> UserProfile:
    """Resolve the caller from the bearer token or reject with 401."""

    token = bearer_token(request)
    user = provider.get_user(token) if token else None
    if user is None:
        logger.debug("Rejected request without a valid bearer token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


def get_family_context(
    user: UserProfile = Depends(get_current_user),
    store: RemoteStore = Depends(get_store),
    family_id: Optional[str] = Header(default=None, alias="X-Family-Id"),
) -> FamilyContext:
    """Memberships of the caller; ``X-Family-Id`` selects the active family."""

    context = FamilyContext(user=user, memberships=get_families_for_user(store, user.id))
    if family_id:
        context.select(family_id)
    return context


def get_active_family(context: FamilyContext = Depends(get_family_context)) -> FamilyContext:
    """Same as :func:`get_family_context` but requires an active family."""

    if not context.has_family:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Create or join a family first",
        )
    return context


def require_permission(action: str) -> Callable[..., FamilyContext]:
    """Dependency factory checking the active role against ``action``."""

    def dependency(context: FamilyContext = Depends(get_active_family)) -> FamilyContext:
        permissions.require(context.role, action)
        return context

    dependency.__name__ = f"require_{action}"
    return dependency
