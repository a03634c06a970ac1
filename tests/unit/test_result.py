"""Tests for the Result type."""

import pytest
from hypothesis import given, strategies as st

from src.expenses.result import Err, Ok


class TestOk:
    def test_is_ok(self) -> None:
        result = Ok(42)
        assert result.is_ok() is True
        assert result.is_err() is False

    def test_unwrap_or_ignores_default(self) -> None:
        assert Ok(42).unwrap_or(0) == 42

    def test_map(self) -> None:
        assert Ok(5).map(lambda x: x * 2).unwrap() == 10

    def test_map_err_keeps_value(self) -> None:
        mapped = Ok(5).map_err(lambda e: f"error: {e}")
        assert mapped.unwrap() == 5

    def test_and_then_chains(self) -> None:
        assert Ok(2).and_then(lambda x: Ok(x + 1)).unwrap() == 3
        assert Ok(2).and_then(lambda x: Err("boom")).is_err()

    def test_expect_returns_value(self) -> None:
        assert Ok("tracker").expect("Could not start") == "tracker"

    def test_unwrap_or_else_ignores_fallback(self) -> None:
        assert Ok(1).unwrap_or_else(lambda e: 0) == 1

    @given(st.integers())
    def test_ok_preserves_value(self, value: int) -> None:
        assert Ok(value).unwrap() == value


class TestErr:
    def test_is_err(self) -> None:
        result = Err("something failed")
        assert result.is_err() is True
        assert result.is_ok() is False

    def test_unwrap_raises(self) -> None:
        with pytest.raises(ValueError, match="fail"):
            Err("fail").unwrap()

    def test_unwrap_or(self) -> None:
        assert Err("fail").unwrap_or(42) == 42

    def test_map_is_skipped(self) -> None:
        assert Err("fail").map(lambda x: x * 2).is_err()

    def test_map_err(self) -> None:
        assert Err("fail").map_err(lambda e: f"wrapped: {e}").error == "wrapped: fail"

    def test_and_then_is_skipped(self) -> None:
        calls = []
        result = Err("fail").and_then(lambda x: calls.append(x) or Ok(x))
        assert result.is_err()
        assert calls == []

    def test_expect_raises_runtime_error(self) -> None:
        with pytest.raises(RuntimeError, match="Could not start: disk full"):
            Err("disk full").expect("Could not start")

    def test_unwrap_or_else_uses_error(self) -> None:
        assert Err("abc").unwrap_or_else(len) == 3
