"""Unit tests for the in-process collection scheduler."""

import asyncio
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from onefact.services.collector.base import CollectionFault, CollectionRun
from onefact.services.collector.pipeline import FactCollectionPipeline
from onefact.workers.scheduler import CollectionScheduler, seconds_until_next_pass

LONG = timedelta(hours=1)


@pytest.fixture
def pipeline() -> FactCollectionPipeline:
    pipeline = MagicMock(spec=FactCollectionPipeline)
    pipeline.collect_facts = AsyncMock(side_effect=lambda: CollectionRun())
    return pipeline


async def wait_for_passes(scheduler: CollectionScheduler, count: int) -> None:
    async with asyncio.timeout(2):
        while scheduler.pass_count < count:
            await asyncio.sleep(0.001)


class TestCollectionScheduler:
    """Tests for CollectionScheduler."""

    def test_rejects_non_positive_interval(self, pipeline):
        with pytest.raises(ValueError):
            CollectionScheduler(pipeline, interval=timedelta(0))

    @pytest.mark.asyncio
    async def test_first_pass_runs_immediately(self, pipeline):
        scheduler = CollectionScheduler(pipeline, interval=LONG)

        scheduler.start_background()
        await wait_for_passes(scheduler, 1)
        await scheduler.stop()

        assert pipeline.collect_facts.await_count == 1
        assert scheduler.last_run is not None
        assert not scheduler.is_running

    @pytest.mark.asyncio
    async def test_repeats_on_interval(self, pipeline):
        scheduler = CollectionScheduler(pipeline, interval=timedelta(milliseconds=5))

        scheduler.start_background()
        await wait_for_passes(scheduler, 3)
        await scheduler.stop()

        assert scheduler.pass_count >= 3

    @pytest.mark.asyncio
    async def test_start_is_idempotent(self, pipeline):
        scheduler = CollectionScheduler(pipeline, interval=LONG)

        task = scheduler.start_background()
        await wait_for_passes(scheduler, 1)

        assert scheduler.start_background() is task
        await scheduler.start()  # returns at once while running
        assert scheduler.is_running

        await scheduler.stop()
        assert pipeline.collect_facts.await_count == 1

    @pytest.mark.asyncio
    async def test_stop_waits_for_in_flight_pass(self, pipeline):
        started = asyncio.Event()
        release = asyncio.Event()

        async def slow_pass():
            started.set()
            await release.wait()
            return CollectionRun(stored_count=4)

        pipeline.collect_facts = AsyncMock(side_effect=slow_pass)
        scheduler = CollectionScheduler(pipeline, interval=LONG)
        scheduler.start_background()
        await started.wait()

        stopping = asyncio.create_task(scheduler.stop())
        await asyncio.sleep(0.01)
        assert not stopping.done()

        release.set()
        await stopping

        assert scheduler.last_run.stored_count == 4
        assert scheduler.pass_count == 1

    @pytest.mark.asyncio
    async def test_crashed_pass_keeps_loop_alive(self, pipeline):
        pipeline.collect_facts = AsyncMock(
            side_effect=[RuntimeError("boom"), CollectionRun(stored_count=1)]
        )
        scheduler = CollectionScheduler(pipeline, interval=timedelta(milliseconds=5))

        scheduler.start_background()
        await wait_for_passes(scheduler, 1)
        await scheduler.stop()

        assert scheduler.last_run.stored_count == 1

    @pytest.mark.asyncio
    async def test_faulty_pass_is_recorded(self, pipeline):
        fault = CollectionFault(kind="source", source="wikipedia", message="HTTP 503")
        pipeline.collect_facts = AsyncMock(return_value=CollectionRun(faults=[fault]))
        scheduler = CollectionScheduler(pipeline, interval=LONG)

        scheduler.start_background()
        await wait_for_passes(scheduler, 1)
        await scheduler.stop()

        assert scheduler.last_run.fault_count == 1

    @pytest.mark.asyncio
    async def test_stop_without_start(self, pipeline):
        scheduler = CollectionScheduler(pipeline, interval=LONG)

        await scheduler.stop()

        assert not scheduler.is_running
        pipeline.collect_facts.assert_not_awaited()


class TestPassTiming:
    """Tests for start-to-start pass spacing."""

    @pytest.mark.parametrize(
        ("elapsed", "expected"),
        [(0.0, 3600.0), (600.0, 3000.0), (3600.0, 0.0), (5000.0, 0.0)],
    )
    def test_seconds_until_next_pass(self, elapsed, expected):
        assert seconds_until_next_pass(LONG, elapsed) == expected

    @pytest.mark.asyncio
    async def test_pass_duration_does_not_delay_schedule(self, pipeline):
        loop = asyncio.get_running_loop()
        starts: list[float] = []

        async def timed_pass():
            starts.append(loop.time())
            await asyncio.sleep(0.2)
            return CollectionRun()

        pipeline.collect_facts = AsyncMock(side_effect=timed_pass)
        scheduler = CollectionScheduler(pipeline, interval=timedelta(milliseconds=300))

        scheduler.start_background()
        await wait_for_passes(scheduler, 2)
        await scheduler.stop()

        # Start to start: about 0.3s, not 0.3s wait plus 0.2s pass
        assert 0.25 <= starts[1] - starts[0] < 0.45
