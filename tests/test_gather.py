"""Tests for the gather_settled combinator."""

import asyncio

import pytest

from mercadoworker.harvester.gather import gather_settled
from mercadoworker.harvester.reporter import RecordingReporter


async def _value(v, delay=0.0):
    await asyncio.sleep(delay)
    return v


async def _boom(message):
    raise RuntimeError(message)


class TestGatherSettled:
    """Test the gather-all combinator."""

    @pytest.mark.asyncio
    async def test_successes_keep_submission_order(self):
        """Test successes keep submission order, not completion order."""
        result = await gather_settled([_value(1, 0.02), _value(2, 0.0), _value(3, 0.01)])
        assert result.successes == [1, 2, 3]
        assert result.ok

    @pytest.mark.asyncio
    async def test_failure_does_not_cancel_siblings(self):
        """Test one failure leaves the other awaitables running."""
        result = await gather_settled([_value("a", 0.01), _boom("x"), _value("b", 0.02)])

        assert result.successes == ["a", "b"]
        assert len(result.failures) == 1
        index, error = result.failures[0]
        assert index == 1
        assert isinstance(error, RuntimeError)
        assert not result.ok

    @pytest.mark.asyncio
    async def test_every_failure_is_reported(self):
        """Test each failure is reported once."""
        reporter = RecordingReporter()

        await gather_settled(
            [_boom("one"), _value(1), _boom("two")],
            reporter=reporter,
            describe=lambda i, e: f"item {i}: {e}",
        )

        assert reporter.of_level("warn") == ["item 0: one", "item 2: two"]

    @pytest.mark.asyncio
    async def test_empty_batch(self):
        """Test an empty batch settles immediately."""
        result = await gather_settled([])
        assert result.successes == []
        assert result.failures == []
