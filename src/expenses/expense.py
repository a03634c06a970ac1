"""Expense models for the tracker.

Defines the records flowing through receipt extraction, embedding,
similarity retrieval and advisory generation.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional, Sequence

SUGGESTED_CATEGORIES: tuple[str, ...] = (
    "Food & Dining",
    "Transportation",
    "Shopping",
    "Utilities",
    "Entertainment",
    "Health",
    "Travel",
    "Business",
)

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class Sentiment(str, Enum):
    """Overall verdict attached to a piece of advice."""

    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"
    WARNING = "warning"


def _as_tuple(values: Optional[Sequence], cast: type) -> Optional[tuple]:
    if values is None:
        return None
    return tuple(cast(v) for v in values)


def validate_iso_date(value: str) -> str:
    """Return ``value`` unchanged if it is a YYYY-MM-DD calendar date."""
    if not _ISO_DATE.match(value):
        raise ValueError(f"Date must be formatted YYYY-MM-DD, got {value!r}")
    date.fromisoformat(value)
    return value


@dataclass(frozen=True, slots=True)
class Expense:
    """One confirmed purchase. Immutable once appended to the history."""

    id: str
    merchant: str
    amount: float
    currency: str
    date: str
    category: str
    tax: Optional[float] = None
    items: Optional[tuple[str, ...]] = None
    description: Optional[str] = None
    embedding: Optional[tuple[float, ...]] = None
    receipt_image: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.id.strip():
            raise ValueError("Expense id cannot be empty")
        if not math.isfinite(self.amount) or self.amount < 0:
            raise ValueError(f"Expense amount must be a non-negative number, got {self.amount}")
        if self.tax is not None and (not math.isfinite(self.tax) or self.tax < 0):
            raise ValueError(f"Expense tax must be a non-negative number, got {self.tax}")
        validate_iso_date(self.date)
        # Lists are accepted for convenience but stored as tuples.
        object.__setattr__(self, "items", _as_tuple(self.items, str))
        object.__setattr__(self, "embedding", _as_tuple(self.embedding, float))

    @property
    def has_embedding(self) -> bool:
        return self.embedding is not None and len(self.embedding) > 0


@dataclass(frozen=True, slots=True)
class SimilarityResult:
    """A historical expense paired with its cosine similarity to a query."""

    expense: Expense
    score: float

    def __post_init__(self) -> None:
        if not -1.0 <= self.score <= 1.0:
            raise ValueError(f"Score must be between -1 and 1, got {self.score}")


@dataclass(frozen=True, slots=True)
class ExtractedReceipt:
    """Fields read off a receipt image. Any of them may be missing."""

    merchant: Optional[str] = None
    amount: Optional[float] = None
    currency: Optional[str] = None
    date: Optional[str] = None
    tax: Optional[float] = None
    category: Optional[str] = None
    items: Optional[tuple[str, ...]] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "items", _as_tuple(self.items, str))


@dataclass(frozen=True, slots=True)
class Advice:
    """Advisory bullet points and their sentiment."""

    advice: list[str]
    sentiment: Sentiment = Sentiment.NEUTRAL


@dataclass(frozen=True, slots=True)
class AnalysisResult:
    """Everything produced by scanning one receipt, before the user confirms it."""

    extracted: ExtractedReceipt
    embedding: list[float]
    similar: list[SimilarityResult]
    advice: list[str]
    sentiment: Sentiment
    analysis_id: str = field(default="")

    @property
    def similar_expenses(self) -> list[Expense]:
        return [s.expense for s in self.similar]
