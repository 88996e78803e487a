"""Exception hierarchy shared by accessors, views and the HTTP surface."""

from __future__ import annotations

from typing import Optional, Sequence


class FamlyError(Exception):
    """Base class for all Famly errors."""


class AuthError(FamlyError):
    """Authentication failed (bad credentials, unconfirmed account, missing session)."""


class NotFoundError(FamlyError):
    """A referenced record (family, task, invite...) does not exist or is not reachable."""


class InviteNotFoundError(NotFoundError):
    """Invite code is unknown or no longer pending."""

    def __init__(self, code: str) -> None:
        super().__init__(f"Invite code {code!r} not found or expired")
        self.code = code


class PermissionDeniedError(FamlyError):
    """The acting member's role does not allow the requested action."""


class StoreError(FamlyError):
    """Read or write against the remote store failed."""

    def __init__(
        self,
        message: str,
        *,
        table: Optional[str] = None,
        operation: Optional[str] = None,
        status_code: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.table = table
        self.operation = operation
        self.status_code = status_code


class ConflictError(StoreError):
    """Write rejected because it violates a uniqueness constraint."""


class PartialCompletionError(FamlyError):
    """A multi-step sequence failed part-way and could not be fully undone."""

    def __init__(self, sequence: str, completed: Sequence[str], cause: BaseException) -> None:
        steps = ", ".join(completed) or "none"
        super().__init__(f"{sequence} partially completed (steps left applied: {steps}): {cause}")
        self.sequence = sequence
        self.completed = list(completed)
        self.cause = cause


__all__ = [
    "FamlyError",
    "AuthError",
    "NotFoundError",
    "InviteNotFoundError",
    "PermissionDeniedError",
    "StoreError",
    "ConflictError",
    "PartialCompletionError",
]
