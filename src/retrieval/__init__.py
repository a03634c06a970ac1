"""Similarity ranking and semantic retrieval over the expense history."""

from src.retrieval.semantic import SemanticRetriever
from src.retrieval.similarity import DimensionMismatchError, cosine_similarity, rank

__all__ = ["SemanticRetriever", "DimensionMismatchError", "cosine_similarity", "rank"]
