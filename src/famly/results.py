"""Success-or-failure results returned by mutating view-state calls."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar, Union

from famly.errors import FamlyError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def ok(self) -> bool:
        return True

    @property
    def error(self) -> Optional[FamlyError]:
        return None


@dataclass(frozen=True)
class Err:
    error: FamlyError

    @property
    def ok(self) -> bool:
        return False

    @property
    def value(self) -> None:
        return None

    @property
    def reason(self) -> str:
        return str(self.error)


Result = Union[Ok[T], Err]


def attempt(call: Callable[..., T], *args, **kwargs) -> "Result[T]":
    """Invoke ``call`` and capture a :class:`FamlyError` as :class:`Err`.

    Anything that is not a Famly error propagates.
    """

    try:
        return Ok(call(*args, **kwargs))
    except FamlyError as exc:
        logger.warning("%s failed: %s", getattr(call, "__name__", repr(call)), exc)
        return Err(exc)


__all__ = ["Ok", "Err", "Result", "attempt"]
