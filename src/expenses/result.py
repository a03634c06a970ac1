"""Explicit success/failure values for provider and storage calls.

Network-backed providers and the history store report failures as values
instead of raising, so the scan flow can decide per step whether to fall
back (empty embedding, canned advice) or abort (failed extraction).

Steps are chained with ``map`` and ``and_then``; the first ``Err`` short
circuits the rest of the chain.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Generic, NoReturn, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """A successful outcome carrying ``value``."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: object) -> T:
        return self.value

    def unwrap_or_else(self, fallback: Callable[[object], object]) -> T:
        return self.value

    def expect(self, context: str) -> T:
        return self.value

    def map(self, fn: Callable[[T], U]) -> Ok[U]:
        return Ok(fn(self.value))

    def map_err(self, fn: Callable[[object], object]) -> Ok[T]:
        return self

    def and_then(self, fn: Callable[[T], Result[U, E]]) -> Result[U, E]:
        return fn(self.value)


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """A failed outcome carrying a human-readable ``error``."""

    error: E

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> NoReturn:
        raise ValueError(f"Called unwrap on Err: {self.error}")

    def unwrap_or(self, default: U) -> U:
        return default

    def unwrap_or_else(self, fallback: Callable[[E], U]) -> U:
        """Compute a replacement value from the error."""
        return fallback(self.error)

    def expect(self, context: str) -> NoReturn:
        """Abort with ``RuntimeError`` where no recovery is possible."""
        raise RuntimeError(f"{context}: {self.error}")

    def map(self, fn: Callable[[object], object]) -> Err[E]:
        return self

    def map_err(self, fn: Callable[[E], U]) -> Err[U]:
        return Err(fn(self.error))

    def and_then(self, fn: Callable[[object], object]) -> Err[E]:
        return self


Result = Union[Ok[T], Err[E]]
