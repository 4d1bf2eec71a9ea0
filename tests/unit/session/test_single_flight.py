"""Tests for single-flight refresh serialization."""

import asyncio

import pytest

from threadview.session.single_flight import SingleFlight


class TestSingleFlight:
    @pytest.mark.asyncio
    async def test_single_call(self) -> None:
        async def operation() -> str:
            return "done"

        assert await SingleFlight(operation)() == "done"

    @pytest.mark.asyncio
    async def test_overlapping_calls_coalesce_into_one_pending_run(self) -> None:
        calls = 0
        gate = asyncio.Event()

        async def operation() -> int:
            nonlocal calls
            calls += 1
            run = calls
            await gate.wait()
            return run

        flight = SingleFlight(operation)
        first = asyncio.create_task(flight())
        await asyncio.sleep(0)
        second = asyncio.create_task(flight())
        third = asyncio.create_task(flight())
        await asyncio.sleep(0)

        assert flight.in_flight
        assert flight.pending

        gate.set()
        results = await asyncio.gather(first, second, third)

        assert results == [1, 2, 2]
        assert calls == 2
        assert not flight.in_flight
        assert not flight.pending

    @pytest.mark.asyncio
    async def test_runs_never_overlap(self) -> None:
        active = 0
        peak = 0

        async def operation() -> None:
            nonlocal active, peak
            active += 1
            peak = max(peak, active)
            await asyncio.sleep(0.01)
            active -= 1

        flight = SingleFlight(operation)
        await asyncio.gather(*(flight() for _ in range(5)))

        assert peak == 1

    @pytest.mark.asyncio
    async def test_failure_reaches_caller_and_next_run_starts_fresh(self) -> None:
        outcomes = [RuntimeError("boom"), "ok"]

        async def operation() -> str:
            outcome = outcomes.pop(0)
            if isinstance(outcome, Exception):
                raise outcome
            return outcome

        flight = SingleFlight(operation)

        with pytest.raises(RuntimeError, match="boom"):
            await flight()
        assert await flight() == "ok"
