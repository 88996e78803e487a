"""Generic table interface shared by the hosted and local backends."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Protocol, runtime_checkable

Row = Dict[str, Any]
Filters = Mapping[str, Any]

TABLES = (
    "families",
    "family_members",
    "tasks",
    "events",
    "shopping_lists",
    "shopping_items",
    "expenses",
    "profiles",
    "invites",
)


@runtime_checkable
class RemoteStore(Protocol):
    """Query/insert/update/delete over the family-scoped table set.

    Filters are column equality; a list or tuple value means "column in values".
    Field names are the underscore_case transport names.
    """

    backend: str

    def select(
        self,
        table: str,
        filters: Optional[Filters] = None,
        *,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[Row]:
        """Return matching rows."""

    def insert(self, table: str, row: Row) -> Row:
        """Insert ``row`` and return it as stored (server defaults applied)."""

    def update(self, table: str, values: Row, filters: Filters) -> List[Row]:
        """Apply ``values`` to matching rows and return the updated rows."""

    def delete(self, table: str, filters: Filters) -> int:
        """Remove matching rows and return how many were removed."""


def row_matches(row: Row, filters: Optional[Filters]) -> bool:
    """Return True when ``row`` satisfies every filter."""

    if not filters:
        return True
    for column, expected in filters.items():
        value = row.get(column)
        if isinstance(expected, (list, tuple, set, frozenset)):
            if value not in expected:
                return False
        elif value != expected:
            return False
    return True


def check_table(table: str) -> None:
    if table not in TABLES:
        raise ValueError(f"Unknown table {table!r}")


__all__ = ["Row", "Filters", "TABLES", "RemoteStore", "row_matches", "check_table"]
