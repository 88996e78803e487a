"""Expense reductions recomputed from the in-memory list on every call."""

from __future__ import annotations

from typing import Dict, Sequence

from famly.models.finance import CategoryTotal, Expense, ExpenseSummary


def summarize_expenses(expenses: Sequence[Expense]) -> ExpenseSummary:
    """Total spend plus per-category totals, largest amount first.

    Categories with equal totals keep the order they were first seen in.

    ``share_percent`` is the category's share of the total (0 when nothing was
    spent), used for bar widths.
    """

    total = sum(expense.amount for expense in expenses)
    by_category: Dict[str, float] = {}
    for expense in expenses:
        by_category[expense.category] = by_category.get(expense.category, 0.0) + expense.amount

    return ExpenseSummary(
        total=total,
        by_category=[
            CategoryTotal(
                category=category,
                amount=amount,
                share_percent=(amount / total * 100.0) if total else 0.0,
            )
            for category, amount in sorted(by_category.items(), key=lambda entry: entry[1], reverse=True)
        ],
    )


def format_amount(amount: float, symbol: str = "€") -> str:
    sign = "-" if amount < 0 else ""
    return f"{sign}{symbol}{abs(amount):.2f}"


__all__ = ["summarize_expenses", "format_amount"]
