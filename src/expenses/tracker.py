"""Expense tracker orchestrating receipt scanning and retrieval.

The tracker is the primary entry point. Scanning a receipt:
1. Extracts structured fields from the image
2. Embeds the canonical description of the expense
3. Ranks the history for similar expenses
4. Asks the advisor to compare the new expense with those matches

Confirming the analysis turns it into an immutable Expense appended to
the history. All providers are injected, enabling mock mode for demos
and testing without API keys.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Optional, Sequence
from uuid import uuid4

from src.expenses.advisor import (
    FALLBACK_ADVICE,
    ReceiptAdvisor,
    create_receipt_advisor,
)
from src.expenses.config import ExpenseConfig
from src.expenses.embeddings import EmbeddingProvider, create_embedding_provider
from src.expenses.expense import (
    Advice,
    AnalysisResult,
    Expense,
    Sentiment,
    SimilarityResult,
    validate_iso_date,
)
from src.expenses.result import Err, Ok, Result
from src.expenses.samples import SAMPLE_EXPENSES
from src.expenses.store import ExpenseStore
from src.expenses.summary import SpendingSummary, summarize
from src.retrieval.semantic import SemanticRetriever
from src.retrieval.similarity import DimensionMismatchError

logger = logging.getLogger(__name__)


class ExpenseTracker:
    """Scan, compare and record expenses.

    Usage:
        tracker = ExpenseTracker(ExpenseConfig(mode=RunMode.MOCK))
        analysis = tracker.analyze(image_b64).unwrap()
        expense = tracker.confirm(analysis).unwrap()
    """

    def __init__(
        self,
        config: Optional[ExpenseConfig] = None,
        store: Optional[ExpenseStore] = None,
        embedding_provider: Optional[EmbeddingProvider] = None,
        advisor: Optional[ReceiptAdvisor] = None,
    ) -> None:
        self._config = config or ExpenseConfig()
        self._store = store if store is not None else ExpenseStore(self._config.store_path)
        self._embeddings = embedding_provider or create_embedding_provider(self._config)
        self._advisor = advisor or create_receipt_advisor(self._config)
        self._retriever = SemanticRetriever(
            self._embeddings,
            top_k=self._config.top_k,
            strict_dimensions=self._config.strict_dimensions,
        )

    @property
    def config(self) -> ExpenseConfig:
        return self._config

    @property
    def store(self) -> ExpenseStore:
        return self._store

    def history(self) -> tuple[Expense, ...]:
        return self._store.all()

    def analyze(
        self, image_b64: str, mime_type: str = "image/jpeg"
    ) -> Result[AnalysisResult, str]:
        """Scan a receipt and compare it with the history.

        Only extraction failure aborts the analysis; a missing embedding
        or failed advice degrade the result instead.
        """
        extract_result = self._advisor.extract(image_b64, mime_type)
        if extract_result.is_err():
            logger.error("Receipt extraction failed: %s", extract_result.error)  # type: ignore[union-attr]
            return Err(f"Failed to analyze receipt: {extract_result.error}")  # type: ignore[union-attr]

        extracted = extract_result.unwrap()
        embedding = self._retriever.embedding_for(
            extracted.merchant or "", extracted.category or "", extracted.items
        )
        try:
            similar = self._retriever.retrieve(embedding, self._store.all())
        except DimensionMismatchError as e:
            return Err(f"Failed to compare receipt with history: {e}")

        advice_result = self._advisor.advise(extracted, [s.expense for s in similar])
        if advice_result.is_err():
            logger.warning("Advice unavailable: %s", advice_result.error)  # type: ignore[union-attr]
        advice = advice_result.unwrap_or(
            Advice(advice=list(FALLBACK_ADVICE), sentiment=Sentiment.NEUTRAL)
        )

        return Ok(
            AnalysisResult(
                extracted=extracted,
                embedding=embedding,
                similar=similar,
                advice=advice.advice,
                sentiment=advice.sentiment,
                analysis_id=str(uuid4()),
            )
        )

    def confirm(
        self,
        analysis: AnalysisResult,
        receipt_image: Optional[str] = None,
        expense_id: Optional[str] = None,
    ) -> Result[Expense, str]:
        """Record an analysed receipt in the history."""
        extracted = analysis.extracted
        expense_date = extracted.date or date.today().isoformat()
        try:
            validate_iso_date(expense_date)
        except ValueError:
            logger.warning("Unusable extracted date %r, using today", expense_date)
            expense_date = date.today().isoformat()

        try:
            expense = Expense(
                id=expense_id or str(uuid4()),
                merchant=extracted.merchant or "Unknown",
                amount=extracted.amount or 0.0,
                currency=extracted.currency or self._config.default_currency,
                date=expense_date,
                category=extracted.category or "Uncategorized",
                tax=extracted.tax,
                items=extracted.items,
                embedding=analysis.embedding or None,
                receipt_image=receipt_image,
            )
        except ValueError as e:
            return Err(f"Invalid expense: {e}")

        return self._store.append(expense)

    def find_similar(
        self, text: str, top_k: Optional[int] = None
    ) -> list[SimilarityResult]:
        """Rank the history against a free-text description."""
        return self._retriever.retrieve(
            self._retriever.embed_text(text), self._store.all(), top_k
        )

    def seed(self, expenses: Sequence[Expense]) -> Result[int, str]:
        """Fill an empty history, embedding any sample that lacks a vector."""
        if self._store.count:
            return Ok(0)
        prepared = list(expenses)
        missing = [i for i, e in enumerate(prepared) if not e.has_embedding]
        vectors = self._retriever.embeddings_for([prepared[i] for i in missing])
        for i, vector in zip(missing, vectors):
            prepared[i] = replace(prepared[i], embedding=vector or None)
        return self._store.seed(prepared)

    def missing_embeddings(self) -> int:
        """Number of history records that can never appear in similarity results."""
        return sum(1 for e in self._store.all() if not e.has_embedding)

    def summary(self, recent: int = 5) -> SpendingSummary:
        return summarize(self._store.all(), recent=recent)


def create_tracker(config: Optional[ExpenseConfig] = None) -> Result[ExpenseTracker, str]:
    """Build a tracker over the configured history file, seeding it if empty."""
    config = config or ExpenseConfig()
    store = ExpenseStore(config.store_path)
    tracker = store.load().map(lambda _: ExpenseTracker(config, store=store))
    if not config.seed_sample_data:
        return tracker
    return tracker.and_then(_seed_samples)


def _seed_samples(tracker: ExpenseTracker) -> Result[ExpenseTracker, str]:
    seeded = tracker.seed(SAMPLE_EXPENSES)
    if seeded.unwrap_or(0):
        logger.info("Seeded %d sample expenses", seeded.unwrap())
    return seeded.map(lambda _: tracker)
