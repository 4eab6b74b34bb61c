"""Tests for onefact.core.database module."""

from unittest.mock import MagicMock

import pytest
from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker

from onefact.core.config import Config
from onefact.core.database import (
    NAMING_CONVENTION,
    Base,
    check_db_connection,
    create_engine,
    create_session_maker,
    init_db,
)
from onefact.models import Fact


@pytest.mark.unit
def test_naming_convention_on_metadata():
    """Test metadata uses the naming convention."""
    assert Base.metadata.naming_convention["pk"] == NAMING_CONVENTION["pk"]


@pytest.mark.unit
def test_fact_table_name_and_constraints():
    """Test the facts table name and unique content hash."""
    table = Fact.__table__
    assert table.name == "facts"
    assert table.c.content_hash.unique is True
    assert "metadata" in table.c


@pytest.mark.unit
def test_create_engine_sqlite():
    """Test SQLite engines are created without pool sizing."""
    engine = create_engine(Config(database_url="sqlite+aiosqlite:///:memory:"))
    assert isinstance(engine, AsyncEngine)
    assert engine.url.drivername == "sqlite+aiosqlite"


@pytest.mark.unit
def test_create_session_maker():
    engine = create_engine(Config(database_url="sqlite+aiosqlite:///:memory:"))
    maker = create_session_maker(engine)
    assert isinstance(maker, async_sessionmaker)
    assert maker.kw["expire_on_commit"] is False


@pytest.mark.unit
@pytest.mark.asyncio
async def test_init_db_creates_tables():
    """Test init_db creates the facts table."""
    engine = create_engine(Config(database_url="sqlite+aiosqlite:///:memory:"))
    await init_db(engine)

    async with engine.connect() as conn:
        tables = await conn.run_sync(lambda sync: inspect(sync).get_table_names())
    await engine.dispose()

    assert "facts" in tables


@pytest.mark.unit
@pytest.mark.asyncio
async def test_check_db_connection_healthy():
    """Test health check succeeds on a reachable database."""
    engine = create_engine(Config(database_url="sqlite+aiosqlite:///:memory:"))
    assert await check_db_connection(engine) is True
    await engine.dispose()


@pytest.mark.unit
@pytest.mark.asyncio
async def test_check_db_connection_unhealthy():
    """Test health check reports failures instead of raising."""
    engine = MagicMock()
    engine.begin.side_effect = OSError("connection refused")

    assert await check_db_connection(engine) is False
