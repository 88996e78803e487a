"""Identity provider backed by the Supabase auth (GoTrue) HTTP API."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import httpx

from famly.data.profiles import upsert_profile
from famly.errors import AuthError, FamlyError
from famly.models.family import UserProfile
from famly.models.session import AuthSession
from famly.store.base import RemoteStore
from famly.store.supabase import SupabaseStore

from .session import AuthEvent, AuthListener, AuthStateNotifier, SessionStorage, Subscription

logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict):
        for key in ("msg", "error_description", "message", "error"):
            if body.get(key):
                return str(body[key])
    return response.text


def _user_from_payload(payload: Dict[str, Any]) -> UserProfile:
    metadata = payload.get("user_metadata") or {}
    return UserProfile(
        id=payload["id"],
        email=payload.get("email") or "",
        full_name=metadata.get("full_name") or metadata.get("name") or "",
        avatar_url=metadata.get("avatar_url"),
    )


def _session_from_payload(payload: Dict[str, Any]) -> AuthSession:
    expires_at = payload.get("expires_at")
    return AuthSession(
        access_token=payload["access_token"],
        refresh_token=payload.get("refresh_token"),
        expires_at=datetime.fromtimestamp(expires_at, tz=timezone.utc) if expires_at else None,
        user=_user_from_payload(payload["user"]),
    )


class SupabaseIdentityProvider:
    """Wraps GoTrue sign-up, password sign-in, token refresh and sign-out."""

    def __init__(
        self,
        base_url: str,
        anon_key: str,
        store: RemoteStore,
        *,
        timeout: float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
        storage: Optional[SessionStorage] = None,
        notifier: Optional[AuthStateNotifier] = None,
    ) -> None:
        self._anon_key = anon_key
        self._store = store
        self._storage = storage or SessionStorage()
        self._notifier = notifier or AuthStateNotifier()
        self._client = httpx.Client(
            base_url=f"{base_url.rstrip('/')}/auth/v1",
            timeout=timeout,
            transport=transport,
        )

    def close(self) -> None:
        self._client.close()

    def _headers(self, access_token: Optional[str] = None) -> Dict[str, str]:
        return {
            "apikey": self._anon_key,
            "Authorization": f"Bearer {access_token or self._anon_key}",
            "Content-Type": "application/json",
        }

    def _post(self, path: str, payload: Dict[str, Any], access_token: Optional[str] = None) -> httpx.Response:
        try:
            response = self._client.post(path, json=payload, headers=self._headers(access_token))
        except httpx.HTTPError as exc:
            raise AuthError(f"Auth service unreachable: {exc}") from exc
        if response.is_error:
            raise AuthError(_error_message(response))
        return response

    def _set_session(self, session: Optional[AuthSession]) -> None:
        if session is None:
            self._storage.clear()
        else:
            self._storage.save(session)
        if isinstance(self._store, SupabaseStore):
            self._store.set_access_token(session.access_token if session else None)

    def sign_up(self, email: str, password: str, name: str) -> Optional[AuthSession]:
        """Register a user; returns None when the account still needs email confirmation."""

        response = self._post(
            "/signup",
            {"email": email.strip(), "password": password, "data": {"full_name": name.strip()}},
        )
        body = response.json()
        session: Optional[AuthSession] = None
        if body.get("access_token"):
            session = _session_from_payload(body)
            self._set_session(session)
            user = session.user
        else:
            user = _user_from_payload(body.get("user") or body)

        try:
            upsert_profile(self._store, UserProfile(id=user.id, email=user.email, full_name=name.strip()))
        except FamlyError as exc:
            logger.error("Profile creation failed for new user %s: %s", user.id, exc)

        if session is not None:
            self._notifier.emit(AuthEvent.SIGNED_IN, session)
        else:
            logger.info("Sign-up for %s awaits email confirmation", user.id)
        return session

    def sign_in(self, email: str, password: str) -> AuthSession:
        response = self._post(
            "/token?grant_type=password", {"email": email.strip(), "password": password}
        )
        session = _session_from_payload(response.json())
        self._set_session(session)
        self._notifier.emit(AuthEvent.SIGNED_IN, session)
        return session

    def refresh_session(self) -> AuthSession:
        current = self._storage.load()
        if current is None or not current.refresh_token:
            raise AuthError("No session to refresh")
        response = self._post(
            "/token?grant_type=refresh_token", {"refresh_token": current.refresh_token}
        )
        session = _session_from_payload(response.json())
        self._set_session(session)
        self._notifier.emit(AuthEvent.TOKEN_REFRESHED, session)
        return session

    def sign_out(self) -> None:
        current = self._storage.load()
        try:
            if current is not None:
                self._post("/logout", {}, access_token=current.access_token)
        finally:
            self._set_session(None)
            self._notifier.emit(AuthEvent.SIGNED_OUT, None)

    def current_session(self) -> Optional[AuthSession]:
        return self._storage.load()

    def is_authenticated(self) -> bool:
        return self._storage.load() is not None

    def get_user(self, access_token: str) -> Optional[UserProfile]:
        if not access_token:
            return None
        try:
            response = self._client.get("/user", headers=self._headers(access_token))
        except httpx.HTTPError as exc:
            logger.warning("User lookup failed: %s", exc)
            return None
        if response.is_error:
            logger.debug("User lookup rejected status=%s", response.status_code)
            return None
        return _user_from_payload(response.json())

    def get_current_user(self) -> Optional[UserProfile]:
        session = self._storage.load()
        if session is None:
            return None
        if session.expires_at is not None and session.expires_at <= datetime.now(timezone.utc):
            try:
                session = self.refresh_session()
            except AuthError as exc:
                logger.info("Stored session expired and could not be refreshed: %s", exc)
                return None
        return self.get_user(session.access_token)

    def on_auth_state_change(self, listener: AuthListener) -> Subscription:
        return self._notifier.subscribe(listener)


__all__ = ["SupabaseIdentityProvider"]
