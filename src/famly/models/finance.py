"""Expense models and aggregated views."""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from pydantic import Field

from famly.models.base import ViewModel

EXPENSE_CATEGORIES = (
    "Groceries",
    "Utilities",
    "Education",
    "Entertainment",
    "Housing",
    "Transport",
    "Healthcare",
    "Other",
)


class Expense(ViewModel):
    """Money spent on behalf of the family."""

    id: str
    family_id: str
    amount: float
    category: str
    description: Optional[str] = Field(default=None)
    date: date
    paid_by: str
    created_at: datetime


class ExpenseDraft(ViewModel):
    amount: float = Field(gt=0)
    category: str = Field(default="Groceries", min_length=1, max_length=64)
    description: Optional[str] = Field(default=None, max_length=500)
    date: date
    paid_by: str


class CategoryTotal(ViewModel):
    category: str
    amount: float
    share_percent: float


class ExpenseSummary(ViewModel):
    """Total spend and per-category breakdown over a set of expenses."""

    total: float
    by_category: list[CategoryTotal] = Field(default_factory=list)


__all__ = [
    "EXPENSE_CATEGORIES",
    "Expense",
    "ExpenseDraft",
    "CategoryTotal",
    "ExpenseSummary",
]
