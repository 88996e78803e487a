"""Mock-mode identity provider backed by local key-value storage."""

from __future__ import annotations

import hashlib
import hmac
import logging
import secrets
from typing import Any, Dict, List, Optional
from uuid import uuid4

from famly.data.profiles import get_profile, upsert_profile
from famly.db.keyvalue import ACCOUNTS_KEY, WRITE_LOCK, load_collection, save_collection
from famly.errors import AuthError, FamlyError
from famly.models.family import UserProfile
from famly.models.session import AuthSession
from famly.store.base import RemoteStore

from .session import AuthEvent, AuthListener, AuthStateNotifier, SessionStorage, Subscription

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6
_PBKDF2_ITERATIONS = 120_000


def _hash_password(password: str, salt: str) -> str:
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt.encode("utf-8"), _PBKDF2_ITERATIONS)
    return digest.hex()


def _normalize_email(email: str) -> str:
    return email.strip().lower()


class LocalIdentityProvider:
    """Accounts, hashed passwords and issued tokens kept beside the local store."""

    def __init__(
        self,
        store: RemoteStore,
        *,
        storage: Optional[SessionStorage] = None,
        notifier: Optional[AuthStateNotifier] = None,
    ) -> None:
        self._store = store
        self._storage = storage or SessionStorage()
        self._notifier = notifier or AuthStateNotifier()

    def _accounts(self) -> List[Dict[str, Any]]:
        return load_collection(ACCOUNTS_KEY)

    def _find_account(self, accounts: List[Dict[str, Any]], email: str) -> Optional[Dict[str, Any]]:
        normalized = _normalize_email(email)
        return next((account for account in accounts if account["email"] == normalized), None)

    def _profile_for(self, account: Dict[str, Any]) -> UserProfile:
        try:
            profile = get_profile(self._store, account["id"])
        except FamlyError as exc:
            logger.warning("Profile lookup for %s failed: %s", account["id"], exc)
            profile = None
        return profile or UserProfile(
            id=account["id"], email=account["email"], full_name=account.get("full_name", "")
        )

    def _issue(self, accounts: List[Dict[str, Any]], account: Dict[str, Any]) -> AuthSession:
        token = secrets.token_urlsafe(32)
        account.setdefault("tokens", []).append(token)
        save_collection(ACCOUNTS_KEY, accounts)
        session = AuthSession(access_token=token, user=self._profile_for(account))
        self._storage.save(session)
        return session

    def sign_up(self, email: str, password: str, name: str) -> AuthSession:
        normalized = _normalize_email(email)
        if "@" not in normalized:
            raise AuthError("Unable to validate email address: invalid format")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise AuthError(f"Password should be at least {MIN_PASSWORD_LENGTH} characters")

        with WRITE_LOCK:
            accounts = self._accounts()
            if self._find_account(accounts, normalized) is not None:
                raise AuthError("User already registered")

            salt = secrets.token_hex(16)
            account = {
                "id": str(uuid4()),
                "email": normalized,
                "full_name": name.strip(),
                "salt": salt,
                "password_hash": _hash_password(password, salt),
                "tokens": [],
            }
            accounts.append(account)
            save_collection(ACCOUNTS_KEY, accounts)

            profile = UserProfile(id=account["id"], email=normalized, full_name=account["full_name"])
            try:
                upsert_profile(self._store, profile)
            except FamlyError as exc:
                logger.error("Profile creation failed for new user %s: %s", profile.id, exc)

            session = self._issue(accounts, account)
        self._notifier.emit(AuthEvent.SIGNED_IN, session)
        return session

    def sign_in(self, email: str, password: str) -> AuthSession:
        with WRITE_LOCK:
            accounts = self._accounts()
            account = self._find_account(accounts, email)
            if account is None or not hmac.compare_digest(
                account["password_hash"], _hash_password(password, account["salt"])
            ):
                raise AuthError("Invalid login credentials")
            session = self._issue(accounts, account)
        self._notifier.emit(AuthEvent.SIGNED_IN, session)
        return session

    def sign_out(self) -> None:
        session = self._storage.load()
        if session is not None:
            with WRITE_LOCK:
                accounts = self._accounts()
                for account in accounts:
                    if session.access_token in account.get("tokens", []):
                        account["tokens"].remove(session.access_token)
                save_collection(ACCOUNTS_KEY, accounts)
        self._storage.clear()
        self._notifier.emit(AuthEvent.SIGNED_OUT, None)

    def current_session(self) -> Optional[AuthSession]:
        return self._storage.load()

    def is_authenticated(self) -> bool:
        return self._storage.load() is not None

    def get_user(self, access_token: str) -> Optional[UserProfile]:
        if not access_token:
            return None
        for account in self._accounts():
            if access_token in account.get("tokens", []):
                return self._profile_for(account)
        return None

    def get_current_user(self) -> Optional[UserProfile]:
        session = self._storage.load()
        if session is None:
            return None
        return self.get_user(session.access_token)

    def on_auth_state_change(self, listener: AuthListener) -> Subscription:
        return self._notifier.subscribe(listener)


__all__ = ["LocalIdentityProvider", "MIN_PASSWORD_LENGTH"]
