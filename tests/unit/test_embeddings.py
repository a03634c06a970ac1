"""Tests for embedding providers."""

import numpy as np

from src.expenses.canonical import canonicalize
from src.expenses.config import ExpenseConfig, RunMode
from src.expenses.embeddings import (
    MockEmbeddingProvider,
    OpenAIEmbeddingProvider,
    create_embedding_provider,
)
from src.retrieval.similarity import cosine_similarity


class TestMockEmbeddingProvider:
    def test_embed(self) -> None:
        provider = MockEmbeddingProvider(dimensions=128)
        result = provider.embed("Expense at Uber for Transportation. Items: Ride")
        assert result.is_ok()
        assert len(result.unwrap()) == 128

    def test_embed_many(self) -> None:
        provider = MockEmbeddingProvider(dimensions=64)
        result = provider.embed_many(["coffee", "taxi"])
        assert result.is_ok()
        embeddings = result.unwrap()
        assert len(embeddings) == 2
        assert all(len(e) == 64 for e in embeddings)

    def test_deterministic(self) -> None:
        provider = MockEmbeddingProvider(dimensions=128)
        assert provider.embed("latte").unwrap() == provider.embed("latte").unwrap()

    def test_unit_vectors(self) -> None:
        provider = MockEmbeddingProvider(dimensions=128)
        norm = np.linalg.norm(np.array(provider.embed("test").unwrap()))
        assert abs(norm - 1.0) < 1e-6

    def test_same_merchant_more_similar(self) -> None:
        provider = MockEmbeddingProvider(dimensions=384)
        coffee = provider.embed(
            canonicalize("Starbucks", "Food & Dining", ["Latte", "Croissant"])
        ).unwrap()
        coffee_again = provider.embed(
            canonicalize("Starbucks", "Food & Dining", ["Latte", "Muffin"])
        ).unwrap()
        taxi = provider.embed(
            canonicalize("Uber", "Transportation", ["Ride to Airport"])
        ).unwrap()
        assert cosine_similarity(coffee, coffee_again) > cosine_similarity(coffee, taxi)

    def test_dimensions_property(self) -> None:
        assert MockEmbeddingProvider(dimensions=256).dimensions == 256


class TestCreateEmbeddingProvider:
    def test_mock_mode(self) -> None:
        config = ExpenseConfig(mode=RunMode.MOCK, embedding_dimensions=32)
        provider = create_embedding_provider(config)
        assert isinstance(provider, MockEmbeddingProvider)
        assert provider.dimensions == 32

    def test_production_mode(self) -> None:
        provider = create_embedding_provider(ExpenseConfig(mode=RunMode.PRODUCTION))
        assert isinstance(provider, OpenAIEmbeddingProvider)

    def test_hybrid_mode_uses_real_embeddings(self) -> None:
        provider = create_embedding_provider(ExpenseConfig(mode=RunMode.HYBRID))
        assert isinstance(provider, OpenAIEmbeddingProvider)
