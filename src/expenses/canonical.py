"""Text rendering of an expense for the embedding model."""

from __future__ import annotations

from typing import Optional, Sequence

FALLBACK_ITEMS = "General goods"


def canonicalize(
    merchant: str, category: str, items: Optional[Sequence[str]] = None
) -> str:
    """Render merchant, category and items as one deterministic sentence.

    >>> canonicalize("Starbucks", "Food & Dining", ["Latte", "Muffin"])
    'Expense at Starbucks for Food & Dining. Items: Latte, Muffin'
    """
    joined = ", ".join(items) if items is not None else ""
    return f"Expense at {merchant} for {category}. Items: {joined or FALLBACK_ITEMS}"
