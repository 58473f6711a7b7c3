"""Tests for shared/saga.py."""

import logging

import pytest
from unittest.mock import MagicMock

from shared.saga import Saga


class TestSagaRun:
    def test_returns_action_result(self):
        saga = Saga("test")

        assert saga.run("step", lambda: 42) == 42

    def test_records_steps_with_compensation(self):
        saga = Saga("test")

        saga.run("first", lambda: 1, compensate=MagicMock())
        saga.run("second", lambda: 2)
        saga.run("third", lambda: 3, compensate=MagicMock())

        assert saga.applied_steps == ["first", "third"]

    def test_failure_unwinds_in_reverse_order(self):
        """Completed steps are compensated last-in first-out."""
        calls = []
        saga = Saga("test")
        saga.run("first", lambda: "a", compensate=lambda r: calls.append(("first", r)))
        saga.run("second", lambda: "b", compensate=lambda r: calls.append(("second", r)))

        def failing():
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            saga.run("third", failing)

        assert calls == [("second", "b"), ("first", "a")]
        assert saga.applied_steps == []

    def test_failed_step_is_not_compensated(self):
        compensate = MagicMock()
        saga = Saga("test")

        def failing():
            raise ValueError("nope")

        with pytest.raises(ValueError):
            saga.run("only", failing, compensate=compensate)

        compensate.assert_not_called()

    def test_failing_compensation_does_not_replace_error(self, caplog):
        """The original error propagates even when a compensation raises."""
        later = MagicMock()
        saga = Saga("test")
        saga.run("first", lambda: "a", compensate=later)
        saga.run("second", lambda: "b", compensate=MagicMock(side_effect=OSError("down")))

        def failing():
            raise RuntimeError("original")

        with caplog.at_level(logging.ERROR, logger="shared.saga"):
            with pytest.raises(RuntimeError, match="original"):
                saga.run("third", failing)

        later.assert_called_once_with("a")
        assert "compensation for 'second' failed" in caplog.text


class TestSagaComplete:
    def test_complete_clears_compensations(self):
        compensate = MagicMock()
        saga = Saga("test")
        saga.run("first", lambda: "a", compensate=compensate)

        saga.complete()
        saga.unwind()

        compensate.assert_not_called()
        assert saga.applied_steps == []
