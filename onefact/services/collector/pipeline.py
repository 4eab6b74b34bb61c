"""Fact collection pipeline service.

This module runs one collection pass over all configured sources. Used by
the in-process scheduler, the Celery task and the admin API.

The pipeline:
1. Fetch raw records from every source concurrently (one task per source,
   each bounded by the source timeout)
2. Validate, score and normalize each record in fetch order
3. Hand accepted facts to a single writer through a bounded queue
4. Persist each fact once; duplicates are counted, not treated as faults

Usage:
    pipeline = FactCollectionPipeline(sources, processor, store)
    run = await pipeline.collect_facts()
"""

from __future__ import annotations

import asyncio
import uuid
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from onefact.config import CollectionConfig
from onefact.core.exceptions import RecordAlreadyExistsError, SourceTimeoutError
from onefact.core.logging import get_logger, log_context
from onefact.services.collector.base import (
    BaseSource,
    CollectionFault,
    CollectionRun,
    ProcessedFact,
    SourceOutcome,
)
from onefact.services.collector.processor import FactProcessor

if TYPE_CHECKING:
    from onefact.services.store.base import FactStore

logger = get_logger(__name__)

# Marks the end of the producer stream
_DONE = object()


class FactCollectionPipeline:
    """Runs collection passes: sources -> processor -> queue -> store.

    Passes are serialized: a pass requested while another is running waits
    for it to finish.

    Attributes:
        sources: Source adapters to collect from
        processor: Validator/scorer
        store: Fact store receiving accepted facts
        config: Queue size and source timeout
        last_run: Result of the most recent completed pass
    """

    def __init__(
        self,
        sources: list[BaseSource[Any]],
        processor: FactProcessor,
        store: FactStore,
        config: CollectionConfig | None = None,
    ) -> None:
        """Initialize pipeline.

        Args:
            sources: Source adapters
            processor: Validator/scorer
            store: Fact store
            config: Collection configuration (uses defaults if not provided)
        """
        self.sources = sources
        self.processor = processor
        self.store = store
        self.config = config or CollectionConfig()
        self.last_run: CollectionRun | None = None
        self._lock = asyncio.Lock()

    async def collect_facts(self) -> CollectionRun:
        """Run one collection pass.

        Every log line of the pass carries a short ``pass_id``.

        Returns:
            CollectionRun with counts, per-source outcomes and faults
        """
        with log_context(pass_id=uuid.uuid4().hex[:8]):
            return await self._collect()

    async def _collect(self) -> CollectionRun:
        async with self._lock:
            run = CollectionRun(
                sources=[SourceOutcome(name=source.name) for source in self.sources]
            )
            logger.info(
                "Collection pass started",
                sources=[source.name for source in self.sources],
                queue_size=self.config.queue_size,
            )

            queue: asyncio.Queue[Any] = asyncio.Queue(maxsize=self.config.queue_size)
            writer = asyncio.create_task(self._consume(queue, run))
            try:
                await asyncio.gather(
                    *(
                        self._produce(source, outcome, queue, run)
                        for source, outcome in zip(self.sources, run.sources, strict=True)
                    )
                )
                await queue.put(_DONE)
                await writer
            except BaseException:
                writer.cancel()
                raise

            run.completed_at = datetime.now(UTC)
            self.last_run = run

        log = logger.info if run.ok else logger.warning
        log(
            "Collection pass complete",
            fetched=run.fetched_count,
            accepted=run.accepted_count,
            stored=run.stored_count,
            duplicates=run.duplicate_count,
            faults=run.fault_count,
            duration_seconds=round(run.duration_seconds, 2),
        )
        return run

    async def _produce(
        self,
        source: BaseSource[Any],
        outcome: SourceOutcome,
        queue: asyncio.Queue[Any],
        run: CollectionRun,
    ) -> None:
        """Fetch from one source and enqueue accepted facts in fetch order.

        Source failures are recorded on the run and never propagate.
        """
        with log_context(source=source.name):
            await self._fetch_and_enqueue(source, outcome, queue, run)

    async def _fetch_and_enqueue(
        self,
        source: BaseSource[Any],
        outcome: SourceOutcome,
        queue: asyncio.Queue[Any],
        run: CollectionRun,
    ) -> None:
        timeout = self.config.source_timeout
        try:
            async with asyncio.timeout(timeout):
                records = await source.get_facts()
        except TimeoutError:
            error = SourceTimeoutError(source.name, timeout)
            self._record_source_fault(run, outcome, str(error))
            return
        except Exception as e:
            self._record_source_fault(run, outcome, str(e) or type(e).__name__)
            return

        outcome.fetched = len(records)
        run.fetched_count += len(records)

        for raw in records:
            try:
                fact = self.processor.process(raw)
            except Exception as e:
                logger.warning(
                    "Failed to process record",
                    error=str(e),
                    exc_info=True,
                )
                continue
            if fact is None:
                continue
            outcome.accepted += 1
            run.accepted_count += 1
            await queue.put((source.name, fact))

        logger.info(
            "Source collected",
            fetched=outcome.fetched,
            accepted=outcome.accepted,
        )

    async def _consume(self, queue: asyncio.Queue[Any], run: CollectionRun) -> None:
        """Write queued facts to the store, one insert per fact."""
        while True:
            item = await queue.get()
            if item is _DONE:
                return
            source_name, fact = item
            await self._store(source_name, fact, run)

    async def _store(self, source_name: str, fact: ProcessedFact, run: CollectionRun) -> None:
        try:
            await self.store.insert(fact)
        except RecordAlreadyExistsError:
            run.duplicate_count += 1
            logger.debug("Duplicate fact skipped", source=source_name, hash=fact.content_hash)
            return
        except Exception as e:
            run.faults.append(CollectionFault(kind="store", source=source_name, message=str(e)))
            logger.error("Failed to store fact", source=source_name, error=str(e), exc_info=True)
            return
        run.stored_count += 1

    def _record_source_fault(
        self, run: CollectionRun, outcome: SourceOutcome, message: str
    ) -> None:
        outcome.error = message
        run.faults.append(CollectionFault(kind="source", source=outcome.name, message=message))
        logger.warning("Source failed", source=outcome.name, error=message)


__all__ = ["FactCollectionPipeline"]
