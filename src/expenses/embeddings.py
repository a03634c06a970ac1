"""Embedding providers with dependency injection for mock mode.

Supports:
- OpenAI embeddings (production, hybrid)
- Mock embeddings (demo/testing - deterministic, no API keys)
"""

from __future__ import annotations

import hashlib
from abc import ABC, abstractmethod

import numpy as np

from src.expenses.config import ExpenseConfig, RunMode
from src.expenses.result import Err, Ok, Result


class EmbeddingProvider(ABC):
    """Turns canonical expense text into a vector."""

    @abstractmethod
    def embed(self, text: str) -> Result[list[float], str]:
        """Embed a single expense description."""
        ...

    @abstractmethod
    def embed_many(self, texts: list[str]) -> Result[list[list[float]], str]:
        """Embed several descriptions in one call."""
        ...

    @property
    @abstractmethod
    def dimensions(self) -> int:
        ...


class MockEmbeddingProvider(EmbeddingProvider):
    """Deterministic mock embeddings for testing and demos.

    Descriptions that share words (same merchant, same category) end up
    with a higher cosine similarity than unrelated ones.
    """

    def __init__(self, dimensions: int = 384) -> None:
        self._dimensions = dimensions

    @property
    def dimensions(self) -> int:
        return self._dimensions

    def embed(self, text: str) -> Result[list[float], str]:
        try:
            return Ok(self._vector_for(text))
        except Exception as e:
            return Err(f"Mock embedding failed: {e}")

    def embed_many(self, texts: list[str]) -> Result[list[list[float]], str]:
        try:
            return Ok([self._vector_for(text) for text in texts])
        except Exception as e:
            return Err(f"Mock embedding failed: {e}")

    def _vector_for(self, text: str) -> list[float]:
        seed = int(hashlib.sha256(text.encode()).hexdigest()[:8], 16)
        vector = np.random.RandomState(seed).randn(self._dimensions) * 0.2

        # Punctuation is stripped so "Starbucks" and "Starbucks." share a feature.
        words = {w.strip(".,;:!?").lower() for w in text.split()}
        for word in filter(None, words):
            word_seed = int(hashlib.md5(word.encode()).hexdigest()[:8], 16)
            vector += np.random.RandomState(word_seed).randn(self._dimensions)

        norm = np.linalg.norm(vector)
        if norm > 0:
            vector = vector / norm
        return vector.tolist()


class OpenAIEmbeddingProvider(EmbeddingProvider):
    """OpenAI API embedding provider for production use."""

    def __init__(self, config: ExpenseConfig) -> None:
        self._config = config
        self._dimensions = config.embedding_dimensions

    @property
    def dimensions(self) -> int:
        return self._dimensions

    def _model(self):  # type: ignore[no-untyped-def]
        from langchain_openai import OpenAIEmbeddings

        return OpenAIEmbeddings(
            model=self._config.embedding_model,
            dimensions=self._dimensions,
            api_key=self._config.openai_api_key,
        )

    def embed(self, text: str) -> Result[list[float], str]:
        try:
            return Ok(self._model().embed_query(text))
        except ImportError:
            return Err("langchain-openai not installed")
        except Exception as e:
            return Err(f"OpenAI embedding failed: {e}")

    def embed_many(self, texts: list[str]) -> Result[list[list[float]], str]:
        try:
            return Ok(self._model().embed_documents(texts))
        except ImportError:
            return Err("langchain-openai not installed")
        except Exception as e:
            return Err(f"OpenAI embedding failed: {e}")


def create_embedding_provider(config: ExpenseConfig) -> EmbeddingProvider:
    """Factory function to create the appropriate embedding provider."""
    if config.mode == RunMode.MOCK:
        return MockEmbeddingProvider(dimensions=config.embedding_dimensions)
    return OpenAIEmbeddingProvider(config)
