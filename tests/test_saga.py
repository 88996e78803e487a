"""Tests for compensating multi-step sequences and result wrapping."""

from __future__ import annotations

import pytest

from famly.errors import NotFoundError, PartialCompletionError, StoreError
from famly.results import attempt
from famly.saga import Saga


def test_all_steps_return_values():
    saga = Saga("demo").step("one", lambda: 1).step("two", lambda: 2)

    assert saga.run() == [1, 2]


def test_failure_compensates_in_reverse_and_reraises():
    undone = []

    def fail():
        raise StoreError("boom")

    saga = Saga("demo")
    saga.step("first", lambda: "a", undone.append)
    saga.step("second", lambda: "b", undone.append)
    saga.step("third", fail)

    with pytest.raises(StoreError, match="boom"):
        saga.run()

    assert undone == ["b", "a"]


def test_failing_compensation_raises_partial_completion():
    def fail():
        raise StoreError("insert failed")

    def broken_undo(_value):
        raise StoreError("delete failed")

    saga = Saga("demo").step("first", lambda: "a", broken_undo).step("second", fail)

    with pytest.raises(PartialCompletionError) as excinfo:
        saga.run()

    assert excinfo.value.sequence == "demo"
    assert excinfo.value.completed == ["first"]
    assert "insert failed" in str(excinfo.value.cause)


def test_step_without_compensation_is_reported():
    def fail():
        raise StoreError("second failed")

    saga = Saga("demo").step("first", lambda: "a").step("second", fail)

    with pytest.raises(PartialCompletionError) as excinfo:
        saga.run()

    assert excinfo.value.completed == ["first"]


def test_attempt_wraps_famly_errors_only():
    def missing():
        raise NotFoundError("gone")

    ok = attempt(lambda value: value * 2, 21)
    err = attempt(missing)

    assert ok.ok and ok.value == 42 and ok.error is None
    assert not err.ok and err.value is None and err.reason == "gone"
    with pytest.raises(ZeroDivisionError):
        attempt(lambda: 1 / 0)
