"""SQLAlchemy fact store.

Persists facts in the ``facts`` table using one async session per
operation. Content-hash uniqueness is enforced by a unique constraint.
Text search and tag filters run against the lowercased ``search_text``
and ``tag_text`` columns, which are recomputed on every insert and update.
"""

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import delete, func, or_, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlalchemy.sql.elements import ColumnElement

from onefact.core.exceptions import DatabaseError, RecordAlreadyExistsError, RecordNotFoundError
from onefact.core.logging import get_logger
from onefact.models.base import as_utc
from onefact.models.fact import SEARCH_SEPARATOR, Fact
from onefact.services.collector.base import ProcessedFact
from onefact.services.store.base import UPDATABLE_FIELDS, FactFilter, FactStore

logger = get_logger(__name__)


def to_processed_fact(row: Fact) -> ProcessedFact:
    """Convert an ORM row to a ProcessedFact.

    Args:
        row: Fact ORM instance

    Returns:
        ProcessedFact DTO
    """
    return ProcessedFact(
        id=str(row.id),
        content=row.content,
        source=row.source,
        category=row.category,
        tags=list(row.tags or []),
        urls=list(row.urls or []),
        metadata=dict(row.fact_metadata or {}),
        verified=row.verified,
        score=row.score,
        content_hash=row.content_hash,
        created_at=as_utc(row.created_at),
        updated_at=as_utc(row.updated_at),
        publish_date=as_utc(row.publish_date),
        last_served_at=as_utc(row.last_served_at),
        serve_count=row.serve_count,
    )


def build_conditions(filter: FactFilter) -> list[ColumnElement[bool]]:
    """Translate a FactFilter into SQL conditions.

    Args:
        filter: Query filter

    Returns:
        Conditions to AND together
    """
    conditions: list[ColumnElement[bool]] = []
    if filter.verified is not None:
        conditions.append(Fact.verified.is_(filter.verified))
    if filter.category:
        conditions.append(func.lower(Fact.category) == filter.category.lower())
    if filter.tag:
        tag = f"{SEARCH_SEPARATOR}{filter.tag.lower()}{SEARCH_SEPARATOR}"
        conditions.append(Fact.tag_text.contains(tag, autoescape=True))
    if filter.difficulty:
        conditions.append(
            func.lower(Fact.fact_metadata["difficulty"].as_string()) == filter.difficulty.lower()
        )
    if filter.language:
        conditions.append(
            func.lower(Fact.fact_metadata["language"].as_string()) == filter.language.lower()
        )
    if filter.not_served_since:
        conditions.append(
            or_(
                Fact.last_served_at.is_(None),
                Fact.last_served_at <= filter.not_served_since,
            )
        )
    if filter.publish_from:
        conditions.append(Fact.publish_date >= filter.publish_from)
    if filter.publish_to:
        conditions.append(Fact.publish_date < filter.publish_to)
    if filter.search:
        conditions.append(Fact.search_text.contains(filter.search.lower(), autoescape=True))
    return conditions


class SqlFactStore(FactStore):
    """FactStore backed by SQLAlchemy async sessions.

    Example:
        >>> store = SqlFactStore(get_session_maker())
        >>> stored = await store.insert(fact)
    """

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]) -> None:
        """Initialize store.

        Args:
            session_maker: Async session factory
        """
        self._session_maker = session_maker

    async def insert(self, fact: ProcessedFact) -> ProcessedFact:
        row = Fact(
            id=uuid.uuid4(),
            content=fact.content,
            source=fact.source,
            category=fact.category,
            tags=list(fact.tags),
            urls=list(fact.urls),
            fact_metadata=dict(fact.metadata),
            verified=fact.verified,
            score=fact.score,
            content_hash=fact.content_hash,
            created_at=fact.created_at,
            updated_at=fact.updated_at,
            publish_date=fact.publish_date,
            last_served_at=fact.last_served_at,
            serve_count=fact.serve_count,
        )
        row.refresh_search_columns()
        try:
            async with self._session_maker.begin() as session:
                session.add(row)
        except IntegrityError as e:
            raise RecordAlreadyExistsError("Fact", "content_hash", fact.content_hash) from e
        except SQLAlchemyError as e:
            raise DatabaseError(f"Failed to insert fact: {e}", operation="insert") from e

        logger.debug("Fact stored", fact_id=str(row.id), source=row.source)
        return to_processed_fact(row)

    async def find_one(self, filter: FactFilter, random: bool = False) -> ProcessedFact | None:
        stmt = select(Fact).where(*build_conditions(filter))
        stmt = stmt.order_by(func.random() if random else Fact.created_at.desc()).limit(1)
        try:
            async with self._session_maker() as session:
                row = (await session.execute(stmt)).scalars().first()
        except SQLAlchemyError as e:
            raise DatabaseError(f"Failed to query facts: {e}", operation="find_one") from e
        return to_processed_fact(row) if row else None

    async def find_many(
        self,
        filter: FactFilter,
        limit: int = 20,
        skip: int = 0,
        sort_by_score: bool = False,
    ) -> list[ProcessedFact]:
        order = Fact.score.desc() if sort_by_score else Fact.created_at.desc()
        stmt = (
            select(Fact)
            .where(*build_conditions(filter))
            .order_by(order, Fact.created_at.desc())
            .offset(skip)
            .limit(limit)
        )
        try:
            async with self._session_maker() as session:
                rows = (await session.execute(stmt)).scalars().all()
        except SQLAlchemyError as e:
            raise DatabaseError(f"Failed to query facts: {e}", operation="find_many") from e
        return [to_processed_fact(row) for row in rows]

    async def update_metadata(
        self,
        fact_id: str,
        last_served: datetime,
        serve_count_increment: int = 1,
    ) -> None:
        pk = Fact.parse_id(fact_id)
        if pk is None:
            raise RecordNotFoundError("Fact", fact_id)
        stmt = (
            update(Fact)
            .where(Fact.id == pk)
            .values(
                last_served_at=last_served,
                serve_count=Fact.serve_count + serve_count_increment,
            )
        )
        try:
            async with self._session_maker.begin() as session:
                result = await session.execute(stmt)
        except SQLAlchemyError as e:
            raise DatabaseError(f"Failed to record serve: {e}", operation="update") from e
        if result.rowcount == 0:
            raise RecordNotFoundError("Fact", fact_id)

    async def get(self, fact_id: str) -> ProcessedFact | None:
        pk = Fact.parse_id(fact_id)
        if pk is None:
            return None
        try:
            async with self._session_maker() as session:
                row = await session.get(Fact, pk)
        except SQLAlchemyError as e:
            raise DatabaseError(f"Failed to load fact: {e}", operation="get") from e
        return to_processed_fact(row) if row else None

    async def update(self, fact_id: str, changes: dict[str, Any]) -> ProcessedFact:
        pk = Fact.parse_id(fact_id)
        if pk is None:
            raise RecordNotFoundError("Fact", fact_id)
        updates = {k: v for k, v in changes.items() if k in UPDATABLE_FIELDS}
        if "metadata" in updates:
            updates["fact_metadata"] = updates.pop("metadata")

        try:
            async with self._session_maker.begin() as session:
                row = await session.get(Fact, pk)
                if row is None:
                    raise RecordNotFoundError("Fact", fact_id)
                for key, value in updates.items():
                    setattr(row, key, value)
                row.refresh_search_columns()
                row.touch()
        except IntegrityError as e:
            raise RecordAlreadyExistsError(
                "Fact", "content_hash", str(updates.get("content_hash", ""))
            ) from e
        except SQLAlchemyError as e:
            raise DatabaseError(f"Failed to update fact: {e}", operation="update") from e
        return to_processed_fact(row)

    async def delete(self, fact_id: str) -> None:
        pk = Fact.parse_id(fact_id)
        if pk is None:
            raise RecordNotFoundError("Fact", fact_id)
        try:
            async with self._session_maker.begin() as session:
                result = await session.execute(delete(Fact).where(Fact.id == pk))
        except SQLAlchemyError as e:
            raise DatabaseError(f"Failed to delete fact: {e}", operation="delete") from e
        if result.rowcount == 0:
            raise RecordNotFoundError("Fact", fact_id)

    async def categories(self) -> list[str]:
        stmt = (
            select(Fact.category)
            .where(Fact.verified.is_(True))
            .distinct()
            .order_by(Fact.category)
        )
        try:
            async with self._session_maker() as session:
                return list((await session.execute(stmt)).scalars().all())
        except SQLAlchemyError as e:
            raise DatabaseError(f"Failed to list categories: {e}", operation="categories") from e


__all__ = [
    "SqlFactStore",
    "build_conditions",
    "to_processed_fact",
]
