"""Tests for the semantic retriever."""

from src.expenses.embeddings import EmbeddingProvider, MockEmbeddingProvider
from src.expenses.expense import Expense
from src.expenses.result import Err, Result
from src.retrieval.semantic import SemanticRetriever


class FailingEmbeddingProvider(EmbeddingProvider):
    @property
    def dimensions(self) -> int:
        return 8

    def embed(self, text: str) -> Result[list[float], str]:
        return Err("service unavailable")

    def embed_many(self, texts: list[str]) -> Result[list[list[float]], str]:
        return Err("service unavailable")


def make_history(provider: EmbeddingProvider) -> list[Expense]:
    rows = [
        ("1", "Starbucks", "Food & Dining", ("Latte", "Muffin")),
        ("2", "Uber", "Transportation", ("Ride to Airport",)),
        ("3", "Amazon", "Shopping", ("Headphones",)),
    ]
    retriever = SemanticRetriever(provider)
    return [
        Expense(
            id=expense_id,
            merchant=merchant,
            amount=10.0,
            currency="USD",
            date="2023-10-15",
            category=category,
            items=items,
            embedding=retriever.embedding_for(merchant, category, items),
        )
        for expense_id, merchant, category, items in rows
    ]


class TestSemanticRetriever:
    def test_embedding_for_uses_provider(self) -> None:
        retriever = SemanticRetriever(MockEmbeddingProvider(dimensions=16))
        assert len(retriever.embedding_for("Uber", "Transportation")) == 16

    def test_failed_embedding_is_empty(self) -> None:
        retriever = SemanticRetriever(FailingEmbeddingProvider())
        assert retriever.embedding_for("Uber", "Transportation") == []

    def test_failed_embedding_yields_no_matches(self) -> None:
        history = make_history(MockEmbeddingProvider(dimensions=64))
        retriever = SemanticRetriever(FailingEmbeddingProvider())
        query = retriever.embedding_for("Starbucks", "Food & Dining", ["Latte"])
        assert retriever.retrieve(query, history) == []

    def test_retrieve_finds_same_merchant(self) -> None:
        provider = MockEmbeddingProvider(dimensions=384)
        retriever = SemanticRetriever(provider, top_k=1)
        history = make_history(provider)
        query = retriever.embedding_for("Starbucks", "Food & Dining", ["Latte", "Croissant"])
        results = retriever.retrieve(query, history)
        assert [r.expense.id for r in results] == ["1"]

    def test_top_k_override(self) -> None:
        provider = MockEmbeddingProvider(dimensions=64)
        retriever = SemanticRetriever(provider, top_k=1)
        history = make_history(provider)
        query = retriever.embedding_for("Uber", "Transportation")
        assert len(retriever.retrieve(query, history, top_k=3)) == 3

    def test_embeddings_for_matches_single_calls(self) -> None:
        provider = MockEmbeddingProvider(dimensions=32)
        retriever = SemanticRetriever(provider)
        history = make_history(provider)
        vectors = retriever.embeddings_for(history)
        assert vectors == [list(e.embedding or ()) for e in history]

    def test_embeddings_for_failure_is_empty(self) -> None:
        history = make_history(MockEmbeddingProvider(dimensions=8))
        retriever = SemanticRetriever(FailingEmbeddingProvider())
        assert retriever.embeddings_for(history) == [[], [], []]

    def test_embeddings_for_nothing(self) -> None:
        retriever = SemanticRetriever(FailingEmbeddingProvider())
        assert retriever.embeddings_for([]) == []
