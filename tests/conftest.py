"""Pytest configuration and fixtures.

This module provides common fixtures used across all tests.
"""

import os
from collections.abc import AsyncGenerator
from datetime import UTC, datetime, timedelta

# Test defaults, set before any Config is built
os.environ.setdefault("FACT_STORE", "memory")
os.environ.setdefault("COLLECTION_ENABLED", "false")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LITELLM_LOCAL_MODEL_COST_MAP", "True")

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from onefact.core.database import Base, create_session_maker
from onefact.core.logging import setup_logging
from onefact.services.collector.base import ProcessedFact, RawRecord
from onefact.services.collector.normalizer import FactNormalizer

# Setup logging for tests
setup_logging()

SAMPLE_CONTENT = (
    "Honey never spoils. Archaeologists have found pots of honey in ancient "
    "Egyptian tombs that are over three thousand years old and still edible."
)


def make_raw(
    content: str = SAMPLE_CONTENT,
    source: str = "test",
    category: str = "Science",
    tags: list[str] | None = None,
    urls: list[str] | None = None,
    metadata: dict[str, str] | None = None,
) -> RawRecord:
    """Create a test RawRecord."""
    return RawRecord(
        content=content,
        source=source,
        category=category,
        tags=tags if tags is not None else ["honey", "history"],
        urls=urls if urls is not None else ["https://example.com/honey"],
        metadata=metadata or {},
    )


def make_fact(
    content: str = SAMPLE_CONTENT,
    category: str = "Science",
    tags: list[str] | None = None,
    metadata: dict[str, str] | None = None,
    verified: bool = True,
    score: float = 1.0,
    publish_date: datetime | None = None,
    last_served_at: datetime | None = None,
    serve_count: int = 0,
    source: str = "test",
) -> ProcessedFact:
    """Create a test ProcessedFact with a matching content hash."""
    return ProcessedFact(
        content=content,
        source=source,
        category=category,
        tags=tags if tags is not None else ["honey"],
        urls=["https://example.com/fact"],
        metadata=metadata or {},
        verified=verified,
        score=score,
        content_hash=FactNormalizer().content_hash(content),
        publish_date=publish_date or datetime.now(UTC) + timedelta(days=1),
        last_served_at=last_served_at,
        serve_count=serve_count,
    )


@pytest.fixture
def raw_record() -> RawRecord:
    """A RawRecord that passes validation."""
    return make_raw()


@pytest.fixture
def raw_factory():
    """Factory for RawRecord test data."""
    return make_raw


@pytest.fixture
def fact_factory():
    """Factory for ProcessedFact test data."""
    return make_fact


@pytest_asyncio.fixture
async def session_maker() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Session factory over a fresh in-memory SQLite database.

    Yields:
        Session factory with the schema created
    """
    import onefact.models  # noqa: F401

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield create_session_maker(engine)

    await engine.dispose()
