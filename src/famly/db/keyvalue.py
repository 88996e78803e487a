"""Wholesale read/write of JSON arrays stored under fixed keys."""

from __future__ import annotations

import json
import logging
import threading
from typing import Any, Dict, List

from sqlalchemy import delete

from .models import CollectionORM
from .engine import session_scope

logger = logging.getLogger(__name__)

KEY_PREFIX = "famly_"
SESSION_KEY = f"{KEY_PREFIX}session"
ACCOUNTS_KEY = f"{KEY_PREFIX}accounts"

# Held across every load-modify-save of a collection within this process.
WRITE_LOCK = threading.RLock()


def collection_key(name: str) -> str:
    return f"{KEY_PREFIX}{name}"


def _decode(raw: str, key: str) -> List[Dict[str, Any]]:
    try:
        decoded = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("Discarding unreadable collection payload for key=%s", key)
        return []
    if not isinstance(decoded, list):
        logger.warning("Collection %s does not hold an array; treating as empty", key)
        return []
    return decoded


def load_collection(key: str) -> List[Dict[str, Any]]:
    """Return every row stored under ``key`` (empty when the key is unset)."""

    with session_scope() as session:
        row = session.get(CollectionORM, key)
        if row is None:
            return []
        return _decode(row.payload, key)


def save_collection(key: str, rows: List[Dict[str, Any]]) -> None:
    """Replace the whole array stored under ``key``."""

    payload = json.dumps(rows, default=str)
    with session_scope() as session:
        session.merge(CollectionORM(key=key, payload=payload))


def drop_collection(key: str) -> None:
    with session_scope() as session:
        row = session.get(CollectionORM, key)
        if row is not None:
            session.delete(row)


def clear_collections() -> None:
    """Remove every stored collection (intended for tests and resets)."""

    with session_scope() as session:
        session.execute(delete(CollectionORM))


__all__ = [
    "KEY_PREFIX",
    "SESSION_KEY",
    "ACCOUNTS_KEY",
    "WRITE_LOCK",
    "collection_key",
    "load_collection",
    "save_collection",
    "drop_collection",
    "clear_collections",
]
