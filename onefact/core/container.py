"""Dependency Injection Container.

This module provides a centralized DI container using dependency-injector.
Lifecycles:
- Singleton: One instance for the container (clients, stores, pipeline)
- Factory: New instance every time (serving services)

Usage:
    # In FastAPI (see onefact.api.dependencies)
    container = ApplicationContainer()
    facts = container.fact_service()

    # In Celery (one container per task run, bound to that event loop)
    container = ApplicationContainer()
    run = await container.pipeline().collect_facts()

    # In tests
    with container.services.fact_store.override(InMemoryFactStore()):
        ...
"""

from dependency_injector import containers, providers
from redis.asyncio import Redis as AsyncRedis

from onefact.config import CollectionConfig, ProcessorConfig, ScoringConfig
from onefact.core.config import Config, get_config
from onefact.core.database import create_engine, create_session_maker


class InfrastructureContainer(containers.DeclarativeContainer):
    """Infrastructure layer dependencies (database, cache, external clients)."""

    global_config = providers.Dependency(instance_of=Config)

    # ============================================
    # Redis
    # ============================================

    redis_async_client = providers.Singleton(
        AsyncRedis.from_url,
        url=global_config.provided.redis_url,
        encoding="utf-8",
        decode_responses=True,
        socket_connect_timeout=5,
        socket_keepalive=True,
    )

    # ============================================
    # Database
    # ============================================

    db_engine = providers.Singleton(create_engine, config=global_config)

    db_session_factory = providers.Singleton(create_session_maker, engine=db_engine)

    # ============================================
    # External clients
    # ============================================

    http_client = providers.Singleton(
        "onefact.infrastructure.http_client.HTTPClient",
        timeout=global_config.provided.request_timeout,
        retries=global_config.provided.http_retries,
    )

    llm_client = providers.Singleton(
        "onefact.infrastructure.llm.LLMClient",
    )


class ConfigContainer(containers.DeclarativeContainer):
    """Typed component configs derived from the environment config."""

    global_config = providers.Dependency(instance_of=Config)

    scoring_config = providers.Singleton(
        ScoringConfig,
        threshold=global_config.provided.score_threshold,
    )

    processor_config = providers.Singleton(ProcessorConfig)

    collection_config = providers.Singleton(
        CollectionConfig,
        interval=global_config.provided.collection_interval,
        queue_size=global_config.provided.fact_queue_size,
        source_timeout=global_config.provided.source_timeout,
    )

    llm_config = providers.Singleton(
        "onefact.infrastructure.llm.LLMConfig",
        model=global_config.provided.llm_model,
        max_tokens=global_config.provided.llm_max_tokens,
        temperature=global_config.provided.llm_temperature,
    )


class ServiceContainer(containers.DeclarativeContainer):
    """Service layer dependencies."""

    global_config = providers.Dependency(instance_of=Config)
    infrastructure = providers.DependenciesContainer()
    configs = providers.DependenciesContainer()

    # ============================================
    # Storage
    # ============================================

    fact_store = providers.Selector(
        global_config.provided.fact_store,
        sql=providers.Singleton(
            "onefact.services.store.sql.SqlFactStore",
            session_maker=infrastructure.db_session_factory,
        ),
        memory=providers.Singleton(
            "onefact.services.store.memory.InMemoryFactStore",
        ),
    )

    fact_cache = providers.Singleton(
        "onefact.services.cache.FactCache",
        redis=infrastructure.redis_async_client,
        max_ttl=global_config.provided.cache_ttl,
    )

    # ============================================
    # Collector Services
    # ============================================

    sources = providers.Singleton(
        "onefact.services.collector.sources.factory.create_sources",
        http_client=infrastructure.http_client,
        config=global_config,
    )

    fact_processor = providers.Singleton(
        "onefact.services.collector.processor.FactProcessor",
        config=configs.processor_config,
        scoring=configs.scoring_config,
    )

    # Singleton: owns the pass lock and the last run
    pipeline = providers.Singleton(
        "onefact.services.collector.pipeline.FactCollectionPipeline",
        sources=sources,
        processor=fact_processor,
        store=fact_store,
        config=configs.collection_config,
    )

    scheduler = providers.Singleton(
        "onefact.workers.scheduler.CollectionScheduler",
        pipeline=pipeline,
        interval=global_config.provided.collection_interval,
    )

    # ============================================
    # Serving Services
    # ============================================

    fact_service = providers.Factory(
        "onefact.services.facts.FactService",
        store=fact_store,
        cache=fact_cache,
        processor=fact_processor,
    )

    chat_service = providers.Factory(
        "onefact.services.chat.FactChatService",
        facts=fact_service,
        llm=infrastructure.llm_client,
        llm_config=configs.llm_config,
    )


class ApplicationContainer(containers.DeclarativeContainer):
    """Root application container.

    Composes all sub-containers and provides the main entry point.
    """

    # Uses get_config() to ensure same instance across the app
    config = providers.Singleton(get_config)

    infrastructure = providers.Container(
        InfrastructureContainer,
        global_config=config,
    )

    configs = providers.Container(
        ConfigContainer,
        global_config=config,
    )

    services = providers.Container(
        ServiceContainer,
        global_config=config,
        infrastructure=infrastructure,
        configs=configs,
    )

    # ============================================
    # Convenience accessors (shortcuts)
    # ============================================

    redis = providers.Singleton(
        lambda client: client,
        client=infrastructure.redis_async_client,
    )

    db_engine = providers.Singleton(
        lambda engine: engine,
        engine=infrastructure.db_engine,
    )

    http_client = providers.Singleton(
        lambda client: client,
        client=infrastructure.http_client,
    )

    fact_store = providers.Singleton(
        lambda store: store,
        store=services.fact_store,
    )

    pipeline = providers.Singleton(
        lambda svc: svc,
        svc=services.pipeline,
    )

    scheduler = providers.Singleton(
        lambda svc: svc,
        svc=services.scheduler,
    )

    fact_service = providers.Factory(
        lambda svc: svc,
        svc=services.fact_service,
    )

    chat_service = providers.Factory(
        lambda svc: svc,
        svc=services.chat_service,
    )


__all__ = [
    "ApplicationContainer",
    "ConfigContainer",
    "InfrastructureContainer",
    "ServiceContainer",
]
