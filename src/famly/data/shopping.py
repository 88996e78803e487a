"""Shopping list persistence helpers."""

from __future__ import annotations

from typing import List

from famly.errors import NotFoundError
from famly.models.shopping import ShoppingItem, ShoppingList
from famly.store.base import RemoteStore, Row


def list_from_row(row: Row) -> ShoppingList:
    return ShoppingList.model_validate(
        {
            "id": row["id"],
            "family_id": row["family_id"],
            "name": row["name"],
            "created_at": row["created_at"],
        }
    )


def item_from_row(row: Row) -> ShoppingItem:
    return ShoppingItem.model_validate(
        {
            "id": row["id"],
            "list_id": row["list_id"],
            "title": row["title"],
            "is_done": bool(row.get("is_done")),
            "created_at": row["created_at"],
        }
    )


def get_shopping_lists(store: RemoteStore, family_id: str) -> List[ShoppingList]:
    """Return the family's lists, newest first."""

    rows = store.select(
        "shopping_lists", {"family_id": family_id}, order_by="created_at", descending=True
    )
    return [list_from_row(row) for row in rows]


def create_shopping_list(store: RemoteStore, family_id: str, name: str) -> ShoppingList:
    cleaned = name.strip()
    if not cleaned:
        raise ValueError("List name must not be empty")
    return list_from_row(store.insert("shopping_lists", {"family_id": family_id, "name": cleaned}))


def delete_shopping_list(store: RemoteStore, family_id: str, list_id: str) -> None:
    """Delete a list; removing its items is left to the store's cascade."""

    if not store.delete("shopping_lists", {"id": list_id, "family_id": family_id}):
        raise NotFoundError(f"Shopping list {list_id} not found")


def get_shopping_items(store: RemoteStore, list_id: str) -> List[ShoppingItem]:
    """Return the list's items, oldest first."""

    rows = store.select("shopping_items", {"list_id": list_id}, order_by="created_at")
    return [item_from_row(row) for row in rows]


def add_shopping_item(store: RemoteStore, list_id: str, title: str) -> ShoppingItem:
    cleaned = title.strip()
    if not cleaned:
        raise ValueError("Item title must not be empty")
    return item_from_row(store.insert("shopping_items", {"list_id": list_id, "title": cleaned}))


def toggle_shopping_item(store: RemoteStore, item_id: str, is_done: bool) -> ShoppingItem:
    """Persist ``is_done`` for one item and return the stored item."""

    rows = store.update("shopping_items", {"is_done": bool(is_done)}, {"id": item_id})
    if not rows:
        raise NotFoundError(f"Shopping item {item_id} not found")
    return item_from_row(rows[0])


def delete_shopping_item(store: RemoteStore, item_id: str) -> None:
    if not store.delete("shopping_items", {"id": item_id}):
        raise NotFoundError(f"Shopping item {item_id} not found")


__all__ = [
    "list_from_row",
    "item_from_row",
    "get_shopping_lists",
    "create_shopping_list",
    "delete_shopping_list",
    "get_shopping_items",
    "add_shopping_item",
    "toggle_shopping_item",
    "delete_shopping_item",
]
