"""Mock-mode store: one JSON array per table in local key-value storage."""

from __future__ import annotations

import logging
import secrets
import string
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.exc import SQLAlchemyError

from famly import metrics
from famly.db.keyvalue import WRITE_LOCK, collection_key, load_collection, save_collection
from famly.errors import ConflictError, StoreError

from .base import Filters, Row, check_table, row_matches

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.ascii_lowercase + string.digits

# Column defaults the hosted schema fills in on insert.
_TABLE_DEFAULTS: Dict[str, Dict[str, Any]] = {
    "tasks": {"status": "TODO"},
    "shopping_items": {"is_done": False},
    "invites": {"status": "PENDING", "role": "MEMBER"},
    "family_members": {"role": "MEMBER"},
}

# Tables keyed by something other than a generated id.
_NO_GENERATED_ID = {"family_members", "profiles"}

_UNIQUE_KEYS: Dict[str, Tuple[Tuple[str, ...], ...]] = {
    "family_members": (("family_id", "user_id"),),
    "invites": (("id",), ("invite_code",)),
    "profiles": (("id",),),
}

# parent table -> [(child table, foreign key column)]
_CASCADES: Dict[str, List[Tuple[str, str]]] = {
    "families": [
        ("family_members", "family_id"),
        ("tasks", "family_id"),
        ("events", "family_id"),
        ("shopping_lists", "family_id"),
        ("expenses", "family_id"),
        ("invites", "family_id"),
    ],
    "shopping_lists": [("shopping_items", "list_id")],
}


def generate_id(length: int = 9) -> str:
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(length))


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _sort_key(column: str):
    def key(row: Row):
        value = row.get(column)
        return (value is None, "" if value is None else str(value))

    return key


class LocalStore:
    """Emulates the hosted tables on top of wholesale key-value collections."""

    backend = "local"

    def _load(self, table: str) -> List[Row]:
        check_table(table)
        try:
            return load_collection(collection_key(table))
        except SQLAlchemyError as exc:
            raise StoreError(str(exc), table=table, operation="read") from exc

    def _save(self, table: str, rows: List[Row], operation: str) -> None:
        try:
            save_collection(collection_key(table), rows)
        except SQLAlchemyError as exc:
            raise StoreError(str(exc), table=table, operation=operation) from exc

    def _record(self, table: str, operation: str, result: str) -> None:
        metrics.STORE_CALLS.labels(
            backend=self.backend, table=table, operation=operation, result=result
        ).inc()

    def select(
        self,
        table: str,
        filters: Optional[Filters] = None,
        *,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[Row]:
        rows = [row for row in self._load(table) if row_matches(row, filters)]
        if order_by:
            rows.sort(key=_sort_key(order_by), reverse=descending)
        self._record(table, "select", "ok")
        return rows

    def insert(self, table: str, row: Row) -> Row:
        with WRITE_LOCK:
            rows = self._load(table)
            stored = self._apply_defaults(table, row)
            self._check_unique(table, rows, stored)
            rows.append(stored)
            self._save(table, rows, "insert")
        self._record(table, "insert", "ok")
        logger.debug("Inserted into %s id=%s", table, stored.get("id"))
        return dict(stored)

    def update(self, table: str, values: Row, filters: Filters) -> List[Row]:
        if not filters:
            raise StoreError("Refusing to update without filters", table=table, operation="update")
        with WRITE_LOCK:
            rows = self._load(table)
            updated: List[Row] = []
            for index, row in enumerate(rows):
                if not row_matches(row, filters):
                    continue
                candidate = {**row, **values}
                others = rows[:index] + rows[index + 1 :]
                self._check_unique(table, others, candidate)
                rows[index] = candidate
                updated.append(dict(candidate))
            if updated:
                self._save(table, rows, "update")
        self._record(table, "update", "ok" if updated else "miss")
        return updated

    def delete(self, table: str, filters: Filters) -> int:
        if not filters:
            raise StoreError("Refusing to delete without filters", table=table, operation="delete")
        with WRITE_LOCK:
            rows = self._load(table)
            removed = [row for row in rows if row_matches(row, filters)]
            if not removed:
                self._record(table, "delete", "miss")
                return 0
            self._save(table, [row for row in rows if not row_matches(row, filters)], "delete")
            parent_ids = [row["id"] for row in removed if "id" in row]
            for child_table, column in _CASCADES.get(table, []):
                if parent_ids:
                    self.delete(child_table, {column: parent_ids})
        self._record(table, "delete", "ok")
        return len(removed)

    def _apply_defaults(self, table: str, row: Row) -> Row:
        stored: Row = {}
        for column, value in _TABLE_DEFAULTS.get(table, {}).items():
            stored[column] = value
        if table not in _NO_GENERATED_ID:
            stored["id"] = generate_id()
        if table == "family_members":
            stored["joined_at"] = _now()
        elif table != "profiles":
            stored["created_at"] = _now()
        stored.update({key: value for key, value in row.items() if value is not None or key not in stored})
        return stored

    def _check_unique(self, table: str, rows: List[Row], candidate: Row) -> None:
        for columns in _UNIQUE_KEYS.get(table, (("id",),)):
            if any(candidate.get(column) is None for column in columns):
                continue
            key = tuple(candidate.get(column) for column in columns)
            if any(tuple(row.get(column) for column in columns) == key for row in rows):
                self._record(table, "write", "conflict")
                raise ConflictError(
                    f"duplicate key value violates unique constraint on {table} ({', '.join(columns)})",
                    table=table,
                    operation="write",
                    status_code=409,
                )


__all__ = ["LocalStore", "generate_id"]
