"""Semantic retrieval of similar expenses.

Canonicalizes an expense into text, embeds it, and ranks the history
by cosine similarity to that embedding.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from src.expenses.canonical import canonicalize
from src.expenses.embeddings import EmbeddingProvider
from src.expenses.expense import Expense, SimilarityResult
from src.retrieval.similarity import DEFAULT_TOP_K, rank

logger = logging.getLogger(__name__)


class SemanticRetriever:
    """Finds historical expenses similar to a new one."""

    def __init__(
        self,
        embeddings: EmbeddingProvider,
        top_k: int = DEFAULT_TOP_K,
        strict_dimensions: bool = False,
    ) -> None:
        self._embeddings = embeddings
        self._top_k = top_k
        self._strict = strict_dimensions

    def embed_text(self, text: str) -> list[float]:
        """Embed free text, falling back to an empty vector on provider failure."""
        return self._embeddings.embed(text).unwrap_or_else(self._without_embedding)

    def embedding_for(
        self, merchant: str, category: str, items: Optional[Sequence[str]] = None
    ) -> list[float]:
        """Embed the canonical description of an expense."""
        return self.embed_text(canonicalize(merchant, category, items))

    def embeddings_for(self, expenses: Sequence[Expense]) -> list[list[float]]:
        """Embed several expenses with one provider call.

        Every vector is empty when the provider fails.
        """
        if not expenses:
            return []
        texts = [canonicalize(e.merchant, e.category, e.items) for e in expenses]
        result = self._embeddings.embed_many(texts)
        if result.is_err():
            self._without_embedding(result.error)  # type: ignore[union-attr]
            return [[] for _ in texts]
        return result.unwrap()

    @staticmethod
    def _without_embedding(error: str) -> list[float]:
        logger.warning("Embedding unavailable, continuing without one: %s", error)
        return []

    def retrieve(
        self,
        query_embedding: Sequence[float],
        history: Sequence[Expense],
        top_k: Optional[int] = None,
    ) -> list[SimilarityResult]:
        """Rank ``history`` against an embedding already computed."""
        k = self._top_k if top_k is None else top_k
        return rank(query_embedding, history, k, strict_dimensions=self._strict)
