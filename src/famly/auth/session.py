"""Identity provider contract, auth-state notifications and the persisted session marker."""

from __future__ import annotations

import logging
import threading
from enum import Enum
from typing import Callable, List, Optional, Protocol

from famly.db.keyvalue import SESSION_KEY, drop_collection, load_collection, save_collection
from famly.models.family import UserProfile
from famly.models.session import AuthSession

logger = logging.getLogger(__name__)


class AuthEvent(str, Enum):
    SIGNED_IN = "SIGNED_IN"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"
    SIGNED_OUT = "SIGNED_OUT"


AuthListener = Callable[[AuthEvent, Optional[AuthSession]], None]


class Subscription:
    """Handle returned by :meth:`AuthStateNotifier.subscribe`."""

    def __init__(self, notifier: "AuthStateNotifier", listener: AuthListener) -> None:
        self._notifier = notifier
        self._listener = listener
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self._notifier._remove(self._listener)
            self.active = False

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.unsubscribe()


class AuthStateNotifier:
    """Fan-out of auth events to subscribed listeners."""

    def __init__(self) -> None:
        self._listeners: List[AuthListener] = []
        self._lock = threading.Lock()

    def subscribe(self, listener: AuthListener) -> Subscription:
        with self._lock:
            self._listeners.append(listener)
        return Subscription(self, listener)

    def _remove(self, listener: AuthListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def emit(self, event: AuthEvent, session: Optional[AuthSession]) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(event, session)
            except Exception:
                logger.exception("Auth listener failed while handling %s", event.value)


class SessionStorage:
    """Persists the current session under the fixed session key."""

    def load(self) -> Optional[AuthSession]:
        rows = load_collection(SESSION_KEY)
        if not rows:
            return None
        try:
            return AuthSession.model_validate(rows[0])
        except ValueError:
            logger.warning("Stored session is unreadable; ignoring it")
            return None

    def save(self, session: AuthSession) -> None:
        save_collection(SESSION_KEY, [session.model_dump(mode="json")])

    def clear(self) -> None:
        drop_collection(SESSION_KEY)


class EphemeralSessionStorage(SessionStorage):
    """Session holder that lives only as long as the object (one HTTP request)."""

    def __init__(self, session: Optional[AuthSession] = None) -> None:
        self._session = session

    def load(self) -> Optional[AuthSession]:
        return self._session

    def save(self, session: AuthSession) -> None:
        self._session = session

    def clear(self) -> None:
        self._session = None


class IdentityProvider(Protocol):
    """Sign-in/up/out against a backend plus current-user retrieval."""

    def get_current_user(self) -> Optional[UserProfile]:
        """Return the signed-in user, or None; never raises for a missing/expired session."""

    def get_user(self, access_token: str) -> Optional[UserProfile]:
        """Resolve the user owning ``access_token`` (None when invalid)."""

    def current_session(self) -> Optional[AuthSession]:
        """Return the persisted session, if any."""

    def is_authenticated(self) -> bool:
        """Whether a session marker is stored."""

    def sign_in(self, email: str, password: str) -> AuthSession:
        """Exchange credentials for a session; backend errors surface as AuthError."""

    def sign_up(self, email: str, password: str, name: str) -> Optional[AuthSession]:
        """Register and sign in; None when the backend still requires email confirmation."""

    def sign_out(self) -> None:
        """Drop the current session and notify listeners."""

    def on_auth_state_change(self, listener: AuthListener) -> Subscription:
        """Subscribe to SIGNED_IN / TOKEN_REFRESHED / SIGNED_OUT events."""


__all__ = [
    "AuthEvent",
    "AuthListener",
    "Subscription",
    "AuthStateNotifier",
    "SessionStorage",
    "EphemeralSessionStorage",
    "IdentityProvider",
]
