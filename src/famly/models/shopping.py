"""Shopping list models."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from famly.models.base import ViewModel


class ShoppingList(ViewModel):
    """Named list owned by a family; owns many items."""

    id: str
    family_id: str
    name: str
    created_at: datetime


class ShoppingItem(ViewModel):
    """Single entry on a shopping list."""

    id: str
    list_id: str
    title: str
    is_done: bool = Field(default=False)
    created_at: datetime


__all__ = ["ShoppingList", "ShoppingItem"]
