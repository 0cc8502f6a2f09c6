"""Unit tests for run_with_fallback."""

from unittest.mock import AsyncMock

import pytest

from lingodrill.infrastructure.fallback import run_with_fallback


class TestRunWithFallback:
    """Test suite for the try-then-degrade helper."""

    @pytest.mark.asyncio
    async def test_first_success_stops_chain(self):
        first = AsyncMock(return_value="one")
        second = AsyncMock(return_value="two")

        outcome = await run_with_fallback([first, second], lambda errors: "degraded")

        assert outcome.value == "one"
        assert not outcome.degraded
        assert outcome.errors == []
        second.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_failure_moves_to_next_attempt(self):
        first = AsyncMock(side_effect=RuntimeError("boom"))
        second = AsyncMock(return_value="two")

        outcome = await run_with_fallback([first, second], lambda errors: "degraded")

        assert outcome.value == "two"
        assert len(outcome.errors) == 1
        assert not outcome.degraded

    @pytest.mark.asyncio
    async def test_all_failures_degrade_with_errors(self):
        errors_seen = []

        def degrade(errors):
            errors_seen.extend(errors)
            return "degraded"

        outcome = await run_with_fallback(
            [AsyncMock(side_effect=RuntimeError("a")), AsyncMock(side_effect=RuntimeError("b"))],
            degrade,
        )

        assert outcome.value == "degraded"
        assert outcome.degraded
        assert [str(e) for e in errors_seen] == ["a", "b"]

    @pytest.mark.asyncio
    async def test_no_attempts_degrades_immediately(self):
        outcome = await run_with_fallback([], lambda errors: len(errors))
        assert outcome.value == 0
        assert outcome.degraded

    @pytest.mark.asyncio
    async def test_async_degrade_is_awaited(self):
        async def degrade(errors):
            return "async"

        outcome = await run_with_fallback([], degrade)
        assert outcome.value == "async"

    @pytest.mark.asyncio
    async def test_on_failure_replaces_recorded_error(self):
        wrapped = ValueError("wrapped")

        outcome = await run_with_fallback(
            [AsyncMock(side_effect=RuntimeError("raw"))],
            lambda errors: errors[0],
            on_failure=lambda index, error: wrapped,
        )

        assert outcome.value is wrapped

    @pytest.mark.asyncio
    async def test_degrade_may_raise(self):
        def degrade(errors):
            raise errors[-1]

        with pytest.raises(RuntimeError, match="boom"):
            await run_with_fallback([AsyncMock(side_effect=RuntimeError("boom"))], degrade)
