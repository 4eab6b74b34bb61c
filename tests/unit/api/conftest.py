"""Fixtures for API tests.

Services run over an in-memory store; the app's dependencies are
overridden so no container, Redis or network is involved.
"""

import asyncio
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from onefact.api.dependencies import get_chat_service, get_fact_service, get_scheduler
from onefact.infrastructure.llm import LLMClient, LLMConfig
from onefact.main import create_app
from onefact.services.chat import FactChatService
from onefact.services.collector.pipeline import FactCollectionPipeline
from onefact.services.collector.processor import FactProcessor
from onefact.services.facts import FactService
from onefact.services.store.memory import InMemoryFactStore
from onefact.workers.scheduler import CollectionScheduler


@pytest.fixture
def store() -> InMemoryFactStore:
    return InMemoryFactStore()


@pytest.fixture
def fact_service(store) -> FactService:
    return FactService(store=store)


@pytest.fixture
def llm() -> LLMClient:
    client = MagicMock(spec=LLMClient)
    client.complete = AsyncMock()
    return client


@pytest.fixture
def chat_service(fact_service, llm) -> FactChatService:
    return FactChatService(
        facts=fact_service, llm=llm, llm_config=LLMConfig(model="openai/gpt-4o-mini")
    )


@pytest.fixture
def pipeline(store) -> FactCollectionPipeline:
    return FactCollectionPipeline(sources=[], processor=FactProcessor(), store=store)


@pytest.fixture
def scheduler(pipeline) -> CollectionScheduler:
    return CollectionScheduler(pipeline, interval=timedelta(hours=6))


@pytest.fixture
def app(fact_service, chat_service, scheduler) -> FastAPI:
    application = create_app()
    application.dependency_overrides[get_fact_service] = lambda: fact_service
    application.dependency_overrides[get_chat_service] = lambda: chat_service
    application.dependency_overrides[get_scheduler] = lambda: scheduler
    return application


@pytest.fixture
def client(app) -> TestClient:
    # Not used as a context manager: the lifespan (and its container) stays off
    return TestClient(app)


@pytest.fixture
def insert(store):
    """Insert facts into the shared store from sync tests."""

    def _insert(fact):
        return asyncio.run(store.insert(fact))

    return _insert
