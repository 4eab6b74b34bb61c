"""Collection scheduler for periodic fact collection.

Runs collection passes inside the API process: one pass immediately on
start, then one every interval (measured start to start) until stopped.

States: Stopped -> Running -> Stopped. Starting a running scheduler is a
no-op. Stopping waits for the in-flight pass; cancelling the loop task
leaves an in-flight pass running to completion.

For multi-process deployments use the Celery beat entry in
``onefact.workers.celery_app`` instead.
"""

import asyncio
from datetime import timedelta

from onefact.core.logging import get_logger
from onefact.services.collector.base import CollectionRun
from onefact.services.collector.pipeline import FactCollectionPipeline

logger = get_logger(__name__)


def seconds_until_next_pass(interval: timedelta, elapsed: float) -> float:
    """Wait before the next pass so passes start one interval apart.

    A pass that overran the interval is followed by the next one at once;
    missed ticks are not made up.

    Args:
        interval: Time between pass starts
        elapsed: Seconds the last pass took

    Returns:
        Seconds to wait (never negative)
    """
    return max(0.0, interval.total_seconds() - elapsed)


class CollectionScheduler:
    """Repeats collection passes on a fixed interval.

    Example usage:
        scheduler = CollectionScheduler(pipeline, interval=timedelta(hours=6))
        scheduler.start_background()
        ...
        await scheduler.stop()

    Attributes:
        pipeline: Pipeline running each pass
        interval: Time between the starts of consecutive passes (fixed rate)
        last_run: Result of the most recent pass
        pass_count: Number of completed passes
    """

    def __init__(
        self,
        pipeline: FactCollectionPipeline,
        interval: timedelta = timedelta(hours=6),
    ) -> None:
        """Initialize the scheduler.

        Args:
            pipeline: Collection pipeline
            interval: Time between pass starts
        """
        if interval <= timedelta(0):
            raise ValueError("interval must be positive")
        self.pipeline = pipeline
        self.interval = interval
        self.last_run: CollectionRun | None = None
        self.pass_count = 0

        self._lock = asyncio.Lock()
        self._running = False
        self._stop_event: asyncio.Event | None = None
        self._current_pass: asyncio.Task[CollectionRun] | None = None
        self._loop_task: asyncio.Task[None] | None = None

    @property
    def is_running(self) -> bool:
        """Whether the loop is active."""
        return self._running

    async def start(self) -> None:
        """Run passes until stopped.

        Returns immediately if the scheduler is already running.
        """
        async with self._lock:
            if self._running:
                logger.info("Collection scheduler already running")
                return
            self._running = True
            stop_event = self._stop_event = asyncio.Event()

        logger.info("Collection scheduler started", interval_seconds=self.interval.total_seconds())
        loop = asyncio.get_running_loop()
        try:
            while not stop_event.is_set():
                started = loop.time()
                await self._run_pass()
                delay = seconds_until_next_pass(self.interval, loop.time() - started)
                try:
                    await asyncio.wait_for(stop_event.wait(), timeout=delay)
                except TimeoutError:
                    continue
        finally:
            self._running = False
            logger.info("Collection scheduler stopped", passes=self.pass_count)

    def start_background(self) -> asyncio.Task[None]:
        """Start the loop as a background task.

        Returns:
            The loop task (the existing one if already started)
        """
        if self._loop_task is None or self._loop_task.done():
            self._loop_task = asyncio.create_task(self.start(), name="collection-scheduler")
        return self._loop_task

    async def stop(self) -> None:
        """Stop the loop and wait for the in-flight pass to finish."""
        if self._stop_event is not None:
            self._stop_event.set()

        current = self._current_pass
        if current is not None and not current.done():
            logger.info("Waiting for in-flight collection pass")
            await asyncio.wait([current])

        if self._loop_task is not None and not self._loop_task.done():
            await asyncio.wait([self._loop_task])
        self._running = False

    async def _run_pass(self) -> None:
        """Run one shielded pass and log its outcome."""
        self._current_pass = asyncio.create_task(self.pipeline.collect_facts())
        try:
            run = await asyncio.shield(self._current_pass)
        except Exception as e:
            logger.error("Collection pass crashed", error=str(e), exc_info=True)
            return

        self.last_run = run
        self.pass_count += 1
        error = run.to_error()
        if error is not None:
            logger.warning("Collection pass had faults", **error.to_dict())


__all__ = ["CollectionScheduler", "seconds_until_next_pass"]
