"""Cosine-similarity ranking over the in-memory expense history.

An exhaustive linear scan: every candidate carrying an embedding is
scored against the query and the best ``top_k`` are returned. Degenerate
inputs (no query, no history, mismatched lengths, zero vectors) produce
empty results or zero scores rather than errors.
"""

from __future__ import annotations

import logging
import math
from typing import Optional, Sequence

import numpy as np

from src.expenses.expense import Expense, SimilarityResult

logger = logging.getLogger(__name__)

DEFAULT_TOP_K = 3


class DimensionMismatchError(ValueError):
    """Raised in strict mode when a candidate embedding has the wrong length."""


def cosine_similarity(vec_a: Sequence[float], vec_b: Sequence[float]) -> float:
    """Cosine of the angle between two vectors.

    Returns 0.0 when the lengths differ or either vector has zero magnitude.
    """
    if len(vec_a) != len(vec_b):
        return 0.0

    a = np.asarray(vec_a, dtype=np.float64)
    b = np.asarray(vec_b, dtype=np.float64)
    norm_a = float(np.linalg.norm(a))
    norm_b = float(np.linalg.norm(b))

    denominator = norm_a * norm_b
    # Also catches two tiny norms whose product underflows.
    if norm_a == 0.0 or norm_b == 0.0 or denominator == 0.0:
        return 0.0

    score = float(np.dot(a, b)) / denominator
    if not math.isfinite(score):
        return 0.0
    # Rounding can push parallel vectors a hair past +/-1.
    return max(-1.0, min(1.0, score))


def rank(
    query: Optional[Sequence[float]],
    candidates: Sequence[Expense],
    top_k: int = DEFAULT_TOP_K,
    *,
    strict_dimensions: bool = False,
) -> list[SimilarityResult]:
    """Return the ``top_k`` candidates most similar to ``query``.

    Candidates without an embedding are skipped. Ties keep their input
    order. With ``strict_dimensions`` a length mismatch raises
    :class:`DimensionMismatchError` instead of scoring 0.
    """
    if isinstance(top_k, bool) or not isinstance(top_k, int) or top_k < 0:
        raise ValueError(f"top_k must be a non-negative integer, got {top_k!r}")

    if query is None or len(query) == 0 or not candidates:
        return []

    scored: list[SimilarityResult] = []
    for expense in candidates:
        if expense.embedding is None or len(expense.embedding) == 0:
            continue
        if len(expense.embedding) != len(query):
            if strict_dimensions:
                raise DimensionMismatchError(
                    f"Expense {expense.id} has {len(expense.embedding)} dimensions, "
                    f"query has {len(query)}"
                )
            logger.debug(
                "Dimension mismatch for expense %s (%d vs %d), scoring 0",
                expense.id,
                len(expense.embedding),
                len(query),
            )
        scored.append(
            SimilarityResult(
                expense=expense,
                score=cosine_similarity(query, expense.embedding),
            )
        )

    # sorted() is stable, so equal scores keep history order.
    scored = sorted(scored, key=lambda r: r.score, reverse=True)
    return scored[:top_k]
