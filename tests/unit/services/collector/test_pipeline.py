"""Unit tests for the fact collection pipeline."""

import asyncio
from unittest.mock import AsyncMock

import pytest
import structlog

from onefact.config import CollectionConfig
from onefact.config.sources import UselessFactsConfig
from onefact.core.exceptions import DatabaseError, SourceFetchError
from onefact.services.collector.base import BaseSource, RawRecord
from onefact.services.collector.pipeline import FactCollectionPipeline
from onefact.services.collector.processor import FactProcessor
from onefact.services.store.memory import InMemoryFactStore


def fact_text(n: int) -> str:
    return f"Fact {n}: honey bees are able to recognise human faces after a short training."


class StubSource(BaseSource[UselessFactsConfig]):
    """Source returning canned records, optionally slow or failing."""

    def __init__(self, name, contents=(), error=None, delay=0.0):
        super().__init__(config=UselessFactsConfig(), http_client=None)
        self.name = name
        self.contents = list(contents)
        self.error = error
        self.delay = delay
        self.calls = 0
        self.log_bindings: dict = {}

    @classmethod
    def build_config(cls, overrides):
        return UselessFactsConfig(**overrides)

    async def get_facts(self):
        self.calls += 1
        self.log_bindings = structlog.contextvars.get_contextvars()
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return [
            RawRecord(content=c, source=self.name, category="Science", tags=["bees"])
            for c in self.contents
        ]

    async def health_check(self):
        return True


class RecordingStore(InMemoryFactStore):
    """Memory store that remembers insert order."""

    def __init__(self):
        super().__init__()
        self.inserted: list[str] = []

    async def insert(self, fact):
        stored = await super().insert(fact)
        self.inserted.append(stored.content)
        return stored


@pytest.fixture
def store() -> RecordingStore:
    return RecordingStore()


def make_pipeline(sources, store, **config) -> FactCollectionPipeline:
    return FactCollectionPipeline(
        sources=sources,
        processor=FactProcessor(),
        store=store,
        config=CollectionConfig(**config),
    )


class TestCollectFacts:
    """Tests for FactCollectionPipeline.collect_facts()."""

    @pytest.mark.asyncio
    async def test_failed_source_does_not_stop_others(self, store):
        healthy = StubSource("healthy", contents=[fact_text(i) for i in range(3)])
        broken = StubSource("broken", error=SourceFetchError("broken", "HTTP 503"))
        pipeline = make_pipeline([healthy, broken], store)

        run = await pipeline.collect_facts()

        assert run.stored_count == 3
        assert run.fetched_count == 3
        assert run.accepted_count == 3
        assert run.fault_count == 1
        assert run.faults[0].kind == "source"
        assert run.faults[0].source == "broken"
        outcomes = {o.name: o for o in run.sources}
        assert outcomes["healthy"].fetched == 3
        assert outcomes["healthy"].error is None
        assert "HTTP 503" in outcomes["broken"].error
        assert len(store) == 3
        assert run.completed_at is not None
        assert pipeline.last_run is run

    @pytest.mark.asyncio
    async def test_slow_source_times_out(self, store):
        fast = StubSource("fast", contents=[fact_text(1)])
        slow = StubSource("slow", contents=[fact_text(2)], delay=5)
        pipeline = make_pipeline([fast, slow], store, source_timeout=0.05)

        run = await pipeline.collect_facts()

        assert run.stored_count == 1
        assert run.fault_count == 1
        assert run.faults[0].source == "slow"
        assert "timed out" in run.faults[0].message

    @pytest.mark.asyncio
    async def test_duplicates_are_counted_not_faults(self, store):
        first = StubSource("first", contents=[fact_text(1), fact_text(2)])
        second = StubSource("second", contents=[fact_text(1).upper()])
        pipeline = make_pipeline([first, second], store)

        run = await pipeline.collect_facts()

        assert run.stored_count == 2
        assert run.duplicate_count == 1
        assert run.ok

    @pytest.mark.asyncio
    async def test_second_pass_stores_nothing_new(self, store):
        source = StubSource("source", contents=[fact_text(1), fact_text(2)])
        pipeline = make_pipeline([source], store)

        await pipeline.collect_facts()
        run = await pipeline.collect_facts()

        assert run.stored_count == 0
        assert run.duplicate_count == 2
        assert len(store) == 2

    @pytest.mark.asyncio
    async def test_rejected_records_not_stored(self, store):
        source = StubSource("source", contents=[fact_text(1), "Too short.", fact_text(2)])
        pipeline = make_pipeline([source], store)

        run = await pipeline.collect_facts()

        assert run.fetched_count == 3
        assert run.accepted_count == 2
        assert run.sources[0].accepted == 2
        assert run.ok

    @pytest.mark.asyncio
    async def test_store_failure_recorded(self, store):
        source = StubSource("source", contents=[fact_text(1), fact_text(2)])
        store.insert = AsyncMock(side_effect=[DatabaseError("connection lost"), None])
        pipeline = make_pipeline([source], store)

        run = await pipeline.collect_facts()

        assert run.stored_count == 1
        assert run.fault_count == 1
        assert run.faults[0].kind == "store"
        assert run.faults[0].source == "source"
        assert run.to_error().store_faults == 1

    @pytest.mark.asyncio
    async def test_small_queue_preserves_fetch_order(self, store):
        contents = [fact_text(i) for i in range(6)]
        pipeline = make_pipeline([StubSource("source", contents=contents)], store, queue_size=1)

        run = await pipeline.collect_facts()

        assert run.stored_count == 6
        assert store.inserted == contents

    @pytest.mark.asyncio
    async def test_no_sources(self, store):
        run = await make_pipeline([], store).collect_facts()

        assert run.ok
        assert run.sources == []
        assert run.stored_count == 0

    @pytest.mark.asyncio
    async def test_concurrent_passes_are_serialized(self, store):
        active = 0
        peak = 0

        class TrackingSource(StubSource):
            async def get_facts(self):
                nonlocal active, peak
                active += 1
                peak = max(peak, active)
                await asyncio.sleep(0.01)
                active -= 1
                return await super().get_facts()

        source = TrackingSource("tracking", contents=[fact_text(1)])
        pipeline = make_pipeline([source], store)

        first, second = await asyncio.gather(pipeline.collect_facts(), pipeline.collect_facts())

        assert peak == 1
        assert source.calls == 2
        assert first.stored_count + second.stored_count == 1
        assert first.duplicate_count + second.duplicate_count == 1


class TestLogContext:
    """Tests for pass/source log bindings."""

    @pytest.mark.asyncio
    async def test_sources_log_with_pass_and_source(self, store):
        first = StubSource("first", [fact_text(1)])
        second = StubSource("second", [fact_text(2)])

        await make_pipeline([first, second], store).collect_facts()

        assert first.log_bindings["source"] == "first"
        assert second.log_bindings["source"] == "second"
        assert first.log_bindings["pass_id"] == second.log_bindings["pass_id"]
        assert len(first.log_bindings["pass_id"]) == 8
        assert "pass_id" not in structlog.contextvars.get_contextvars()

    @pytest.mark.asyncio
    async def test_each_pass_gets_its_own_id(self, store):
        source = StubSource("only", [fact_text(1)])
        pipeline = make_pipeline([source], store)

        await pipeline.collect_facts()
        first_id = source.log_bindings["pass_id"]
        await pipeline.collect_facts()

        assert source.log_bindings["pass_id"] != first_id
