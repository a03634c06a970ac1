"""Sample history used to populate an empty store for demos."""

from __future__ import annotations

from src.expenses.expense import Expense

SAMPLE_EXPENSES = [
    Expense(
        id="1",
        merchant="Starbucks",
        amount=5.40,
        currency="USD",
        date="2023-10-15",
        category="Food & Dining",
        items=("Latte", "Muffin"),
    ),
    Expense(
        id="2",
        merchant="Uber",
        amount=24.50,
        currency="USD",
        date="2023-10-18",
        category="Transportation",
        items=("Ride to Airport",),
    ),
    Expense(
        id="3",
        merchant="Amazon",
        amount=120.00,
        currency="USD",
        date="2023-10-20",
        category="Shopping",
        items=("Headphones",),
    ),
    Expense(
        id="4",
        merchant="Starbucks",
        amount=4.80,
        currency="USD",
        date="2023-11-01",
        category="Food & Dining",
        items=("Coffee",),
    ),
]
