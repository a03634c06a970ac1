"""Basic expense tracker example.

Scans a receipt against a small history and records it, using mock mode.
No API keys required.

Usage:
    python examples/basic_tracker.py
"""

from src.expenses.config import ExpenseConfig, RunMode
from src.expenses.expense import Expense
from src.expenses.store import ExpenseStore
from src.expenses.tracker import ExpenseTracker


def main() -> None:
    # 1. Mock providers and an in-memory history
    config = ExpenseConfig(mode=RunMode.MOCK, top_k=2)
    tracker = ExpenseTracker(config, store=ExpenseStore())

    # 2. A few past purchases
    history = [
        Expense(id="h1", merchant="Uber", amount=22.00, currency="USD",
                date="2024-03-02", category="Transportation", items=("Ride to Airport",)),
        Expense(id="h2", merchant="Uber", amount=18.40, currency="USD",
                date="2024-03-09", category="Transportation", items=("Ride Home",)),
        Expense(id="h3", merchant="Whole Foods", amount=61.30, currency="USD",
                date="2024-03-10", category="Food & Dining", items=("Bananas", "Bread")),
    ]
    seeded = tracker.seed(history)
    if seeded.is_err():
        print(f"Seeding failed: {seeded.error}")
        return
    print(f"History holds {seeded.unwrap()} expenses")

    # 3. Scan a receipt (the mock advisor ignores the bytes)
    result = tracker.analyze("ZmFrZSByZWNlaXB0")
    if result.is_err():
        print(f"Scan failed: {result.error}")
        return
    analysis = result.unwrap()
    print(f"\nScanned: {analysis.extracted.merchant} {analysis.extracted.amount}")
    for match in analysis.similar:
        print(f"   ~ {match.expense.merchant} {match.expense.amount:.2f} (score {match.score:.3f})")
    print(f"Advice ({analysis.sentiment.value}):")
    for line in analysis.advice:
        print(f"   - {line}")

    # 4. Confirm it
    saved = tracker.confirm(analysis)
    if saved.is_ok():
        print(f"\nSaved {saved.unwrap().id}; history now holds {len(tracker.history())} expenses")


if __name__ == "__main__":
    main()
