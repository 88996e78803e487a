"""Expense accessors."""

from __future__ import annotations

from typing import List

from famly.errors import NotFoundError
from famly.models.finance import Expense, ExpenseDraft
from famly.store.base import RemoteStore, Row


def expense_from_row(row: Row) -> Expense:
    return Expense.model_validate(
        {
            "id": row["id"],
            "family_id": row["family_id"],
            "amount": float(row["amount"]),
            "category": row["category"],
            "description": row.get("description"),
            "date": row["date"],
            "paid_by": row["paid_by"],
            "created_at": row["created_at"],
        }
    )


def get_expenses(store: RemoteStore, family_id: str) -> List[Expense]:
    """Return the family's expenses, most recent date first."""

    rows = store.select("expenses", {"family_id": family_id}, order_by="date", descending=True)
    return [expense_from_row(row) for row in rows]


def create_expense(store: RemoteStore, family_id: str, draft: ExpenseDraft) -> Expense:
    payload = draft.model_dump(mode="json")
    row = {
        "family_id": family_id,
        "amount": payload["amount"],
        "category": payload["category"].strip(),
        "description": payload["description"],
        "date": payload["date"],
        "paid_by": payload["paid_by"],
    }
    return expense_from_row(store.insert("expenses", row))


def delete_expense(store: RemoteStore, family_id: str, expense_id: str) -> None:
    if not store.delete("expenses", {"id": expense_id, "family_id": family_id}):
        raise NotFoundError(f"Expense {expense_id} not found")


__all__ = ["expense_from_row", "get_expenses", "create_expense", "delete_expense"]
