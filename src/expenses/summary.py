"""Dashboard figures over the expense history."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Optional, Sequence

from src.expenses.expense import Expense


@dataclass(frozen=True, slots=True)
class SpendingSummary:
    total_spent: float
    count: int
    category_totals: list[tuple[str, float]]
    top_category: Optional[str]
    recent: list[Expense]


def summarize(expenses: Sequence[Expense], recent: int = 5) -> SpendingSummary:
    """Totals per category and the latest purchases.

    Categories are ordered by descending total, then by name. Recent
    expenses are ordered by date, newest first; ISO dates compare as strings.
    """
    totals: dict[str, float] = defaultdict(float)
    for expense in expenses:
        totals[expense.category] += expense.amount

    category_totals = sorted(totals.items(), key=lambda kv: (-kv[1], kv[0]))
    latest = sorted(expenses, key=lambda e: e.date, reverse=True)[: max(recent, 0)]

    return SpendingSummary(
        total_spent=sum(e.amount for e in expenses),
        count=len(expenses),
        category_totals=category_totals,
        top_category=category_totals[0][0] if category_totals else None,
        recent=latest,
    )
