"""Expense core - receipt analysis, history storage and advice."""

from src.expenses.canonical import canonicalize
from src.expenses.config import ExpenseConfig, MockConfig
from src.expenses.expense import Expense, SimilarityResult
from src.expenses.result import Err, Ok, Result

__all__ = [
    "canonicalize",
    "ExpenseConfig",
    "MockConfig",
    "Expense",
    "SimilarityResult",
    "Result",
    "Ok",
    "Err",
]
