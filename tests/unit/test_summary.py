"""Tests for the spending summary."""

import pytest

from src.expenses.expense import Expense
from src.expenses.samples import SAMPLE_EXPENSES
from src.expenses.summary import summarize


class TestSummarize:
    def test_sample_history(self) -> None:
        summary = summarize(SAMPLE_EXPENSES)
        assert summary.count == 4
        assert summary.total_spent == pytest.approx(154.70)
        assert summary.top_category == "Shopping"
        assert summary.category_totals[0] == ("Shopping", pytest.approx(120.0))
        assert [name for name, _ in summary.category_totals] == [
            "Shopping",
            "Transportation",
            "Food & Dining",
        ]

    def test_recent_newest_first(self) -> None:
        summary = summarize(SAMPLE_EXPENSES, recent=2)
        assert [e.id for e in summary.recent] == ["4", "3"]

    def test_empty(self) -> None:
        summary = summarize([])
        assert summary.count == 0
        assert summary.total_spent == 0
        assert summary.top_category is None
        assert summary.category_totals == []
        assert summary.recent == []

    def test_category_ties_by_name(self) -> None:
        expenses = [
            Expense(id="1", merchant="A", amount=10, currency="USD", date="2024-01-01", category="Travel"),
            Expense(id="2", merchant="B", amount=10, currency="USD", date="2024-01-02", category="Health"),
        ]
        assert summarize(expenses).top_category == "Health"
