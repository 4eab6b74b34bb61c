"""Database configuration and session management.

This module provides SQLAlchemy 2.0 async engine and session management.
It includes the Base class for all ORM models and utility functions.
"""

import re
from typing import Any, ClassVar

from sqlalchemy import MetaData, text
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase, declared_attr

from onefact.core.config import Config, get_config
from onefact.core.logging import get_logger

logger = get_logger(__name__)

# ============================================
# Naming Convention
# ============================================
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",  # Index
    "uq": "uq_%(table_name)s_%(column_0_name)s",  # Unique constraint
    "ck": "ck_%(table_name)s_%(constraint_name)s",  # Check constraint
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",  # Foreign key
    "pk": "pk_%(table_name)s",  # Primary key
}

metadata = MetaData(naming_convention=NAMING_CONVENTION)


# ============================================
# Base Model
# ============================================


class Base(DeclarativeBase):
    """Base class for all ORM models.

    Provides common functionality for all models including:
    - Consistent table naming (snake_case)
    - Metadata with naming conventions
    - __repr__ implementation
    """

    metadata: ClassVar[MetaData] = metadata

    @declared_attr.directive
    @classmethod
    def __tablename__(cls) -> str:
        """Generate table name from class name.

        Returns:
            Snake case table name
        """
        return re.sub(r"(?<!^)(?=[A-Z])", "_", cls.__name__).lower()

    def __repr__(self) -> str:
        """String representation of model instance."""
        columns = ", ".join(
            f"{k}={v!r}"
            for k, v in self.__dict__.items()
            if not k.startswith("_") and k != "metadata"
        )
        return f"{self.__class__.__name__}({columns})"


# ============================================
# Engine and Session
# ============================================


def create_engine(config: Config | None = None) -> AsyncEngine:
    """Create an async engine from configuration.

    Pool sizing only applies to PostgreSQL; SQLite uses SQLAlchemy's
    default pool for the URL.

    Args:
        config: Application config (defaults to the global config)

    Returns:
        Async SQLAlchemy engine
    """
    config = config or get_config()
    kwargs: dict[str, Any] = {"echo": config.database_echo}
    if config.database_url.startswith("postgresql"):
        kwargs.update(
            pool_size=config.database_pool_size,
            max_overflow=config.database_max_overflow,
            pool_pre_ping=True,  # Verify connections before using
            pool_recycle=3600,  # Recycle connections after 1 hour
        )
    return create_async_engine(config.database_url, **kwargs)


def create_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Create a session factory bound to an engine.

    Args:
        engine: Async engine

    Returns:
        Session factory producing AsyncSession objects
    """
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


async def init_db(engine: AsyncEngine) -> None:
    """Initialize database (create all tables).

    This is mainly for development/testing. In production, use Alembic migrations.

    Args:
        engine: Engine to create the tables on
    """
    # Register ORM models on the metadata
    import onefact.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database initialized")


# ============================================
# Health Check
# ============================================


async def check_db_connection(engine: AsyncEngine) -> bool:
    """Check if database connection is healthy.

    Args:
        engine: Engine to check

    Returns:
        True if connection is successful, False otherwise
    """
    try:
        async with engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error("Database health check failed", error=str(e), exc_info=True)
        return False
