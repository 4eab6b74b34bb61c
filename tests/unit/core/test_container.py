"""Unit tests for the Dependency Injection Container.

Tests cover:
- Config-driven wiring of typed component configs
- Store backend selection
- Provider lifecycles (Singleton, Factory)
- Overrides for testing
"""

from datetime import timedelta

import pytest
from dependency_injector import providers

from onefact.core.config import Config
from onefact.core.container import ApplicationContainer
from onefact.services.collector.pipeline import FactCollectionPipeline
from onefact.services.facts import FactService
from onefact.services.store.memory import InMemoryFactStore
from onefact.services.store.sql import SqlFactStore
from onefact.workers.scheduler import CollectionScheduler


def make_container(**overrides) -> ApplicationContainer:
    """Create a container bound to an explicit Config."""
    settings = {
        "fact_store": "memory",
        "database_url": "sqlite+aiosqlite:///:memory:",
        "collection_interval": "90m",
        "score_threshold": 1.1,
        "fact_queue_size": 7,
        "source_timeout": 3.0,
        "enabled_sources": "wikipedia,numbers_api",
    }
    settings.update(overrides)
    container = ApplicationContainer()
    container.config.override(providers.Object(Config(_env_file=None, **settings)))
    return container


class TestConfigWiring:
    """Tests for component configs derived from Config."""

    def test_scoring_threshold(self):
        container = make_container()
        assert container.configs.scoring_config().threshold == 1.1

    def test_collection_config(self):
        """Test queue size, timeout and interval flow into CollectionConfig."""
        config = make_container().configs.collection_config()
        assert config.queue_size == 7
        assert config.source_timeout == 3.0
        assert config.interval == timedelta(minutes=90)

    def test_llm_config(self):
        container = make_container(llm_model="openai/gpt-4o-mini")
        assert container.configs.llm_config().model == "openai/gpt-4o-mini"

    def test_http_client_settings(self):
        """Test request timeout and connection retries reach the HTTP client."""
        client = make_container(request_timeout=4.0, http_retries=5).infrastructure.http_client()

        assert client.retries == 5
        assert client._client.timeout.read == 4.0


class TestStoreSelection:
    """Tests for the fact store selector."""

    def test_memory_store(self):
        container = make_container(fact_store="memory")
        store = container.fact_store()
        assert isinstance(store, InMemoryFactStore)
        assert container.fact_store() is store

    def test_sql_store(self):
        container = make_container(fact_store="sql")
        assert isinstance(container.fact_store(), SqlFactStore)


class TestServiceWiring:
    """Tests for service providers."""

    def test_sources_follow_enabled_sources(self):
        container = make_container()
        assert [s.name for s in container.services.sources()] == ["wikipedia", "numbers_api"]

    def test_pipeline_is_singleton(self):
        """Test the pipeline keeps one lock and last run per container."""
        container = make_container()
        pipeline = container.pipeline()
        assert isinstance(pipeline, FactCollectionPipeline)
        assert container.pipeline() is pipeline
        assert pipeline.config.queue_size == 7
        assert pipeline.store is container.fact_store()

    def test_scheduler_uses_interval(self):
        container = make_container()
        scheduler = container.scheduler()
        assert isinstance(scheduler, CollectionScheduler)
        assert scheduler.interval == timedelta(minutes=90)
        assert scheduler.pipeline is container.pipeline()

    def test_fact_service_is_factory(self):
        """Test serving services are created per call over shared singletons."""
        container = make_container()
        first = container.fact_service()
        second = container.fact_service()
        assert isinstance(first, FactService)
        assert first is not second
        assert first.store is second.store

    def test_override_store(self):
        """Test overriding the store for tests."""
        container = make_container()
        replacement = InMemoryFactStore()
        with container.services.fact_store.override(replacement):
            assert container.fact_service().store is replacement
