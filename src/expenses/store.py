"""Append-only expense history persisted as a JSON file.

Records are never updated or deleted. Readers get a tuple snapshot, so a
ranking call running alongside an append sees either the old or the new
collection, never a partial one.
"""

from __future__ import annotations

import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Iterable, Optional

from pydantic import TypeAdapter

from src.expenses.expense import Expense
from src.expenses.result import Err, Ok, Result

logger = logging.getLogger(__name__)

_EXPENSES = TypeAdapter(list[Expense])


class ExpenseStore:
    """JSON-file backed, append-only collection of expenses.

    Pass ``path=None`` for a purely in-memory store.
    """

    def __init__(self, path: Optional[str | Path] = None) -> None:
        self._path = Path(path) if path is not None else None
        self._expenses: tuple[Expense, ...] = ()
        self._ids: set[str] = set()
        self._lock = threading.Lock()

    @property
    def path(self) -> Optional[Path]:
        return self._path

    @property
    def count(self) -> int:
        return len(self._expenses)

    def all(self) -> tuple[Expense, ...]:
        """Snapshot of the history in insertion order."""
        return self._expenses

    def load(self) -> Result[int, str]:
        """Read the history file. A missing file is an empty history."""
        if self._path is None or not self._path.exists():
            return Ok(0)
        try:
            expenses = _EXPENSES.validate_json(self._path.read_bytes())
        except (OSError, ValueError) as e:
            return Err(f"Could not read expense history {self._path}: {e}")

        with self._lock:
            self._expenses = tuple(expenses)
            self._ids = {e.id for e in expenses}
        logger.info("Loaded %d expenses from %s", len(expenses), self._path)
        return Ok(len(expenses))

    def append(self, expense: Expense) -> Result[Expense, str]:
        """Add one expense to the end of the history and persist it."""
        with self._lock:
            if expense.id in self._ids:
                return Err(f"Expense {expense.id} already exists")
            updated = self._expenses + (expense,)
            written = self._write(updated)
            if written.is_err():
                return written  # type: ignore[return-value]
            self._expenses = updated
            self._ids.add(expense.id)

        logger.info("Stored expense %s (%s, %.2f)", expense.id, expense.merchant, expense.amount)
        return Ok(expense)

    def seed(self, expenses: Iterable[Expense]) -> Result[int, str]:
        """Populate an empty history. Does nothing when records already exist."""
        if self._expenses:
            return Ok(0)
        added = 0
        for expense in expenses:
            result = self.append(expense)
            if result.is_err():
                return result.map_err(lambda e: f"Seeding failed: {e}")
            added += 1
        return Ok(added)

    def _write(self, expenses: tuple[Expense, ...]) -> Result[None, str]:
        if self._path is None:
            return Ok(None)
        tmp_name: Optional[str] = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            payload = _EXPENSES.dump_json(list(expenses), indent=2, exclude_none=True)
            fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, suffix=".tmp")
            with os.fdopen(fd, "wb") as fh:
                fh.write(payload)
            os.replace(tmp_name, self._path)
            return Ok(None)
        except OSError as e:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            return Err(f"Could not write expense history {self._path}: {e}")
