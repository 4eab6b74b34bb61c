"""Fact serving service.

Selects the daily and random facts, records serves, and implements the
admin create/update/delete operations on top of a FactStore.

Selection rules:
- Daily: cached fact for today (re-read from the store, skipped once it is
  deleted or unverified) -> fact scheduled for today -> random fact.
  The chosen fact is cached until the end of the UTC day.
- Random: prefer facts not served in the last 24 hours, then any verified fact.

"No fact found" is reported with FactNotFoundError, never with a server
error.
"""

from datetime import UTC, datetime, time, timedelta
from typing import Any

from onefact.core.exceptions import (
    ContentValidationError,
    FactNotFoundError,
    RecordNotFoundError,
)
from onefact.core.logging import get_logger
from onefact.services.cache import FactCache
from onefact.services.collector.base import ProcessedFact, RawRecord
from onefact.services.collector.processor import FactProcessor
from onefact.services.store.base import FactFilter, FactStore

logger = get_logger(__name__)

RECENTLY_SERVED_WINDOW = timedelta(hours=24)
ADMIN_SOURCE = "admin"


class FactService:
    """Serving-layer operations over the fact store.

    Attributes:
        store: Fact store
        cache: Optional Redis cache (serving works without it)
        processor: Used for normalization and scoring of admin facts
    """

    def __init__(
        self,
        store: FactStore,
        cache: FactCache | None = None,
        processor: FactProcessor | None = None,
    ) -> None:
        """Initialize service.

        Args:
            store: Fact store
            cache: Daily fact cache
            processor: Fact processor
        """
        self.store = store
        self.cache = cache
        self.processor = processor or FactProcessor()

    # ============================================
    # Pipeline-facing
    # ============================================

    async def store_fact(self, fact: ProcessedFact) -> ProcessedFact:
        """Persist a processed fact.

        Raises:
            RecordAlreadyExistsError: If the fact is a duplicate
        """
        return await self.store.insert(fact)

    # ============================================
    # Serving
    # ============================================

    async def find_daily_fact(self, category: str | None = None) -> ProcessedFact:
        """Get the fact of the day.

        Args:
            category: Optional category restriction

        Returns:
            Today's fact (with the serve recorded)

        Raises:
            FactNotFoundError: If no verified fact matches
        """
        now = datetime.now(UTC)

        if self.cache is not None:
            cached = await self.cache.get_daily_fact(category, now=now)
            if cached is not None and cached.id:
                # Serve the stored copy so admin edits apply immediately
                current = await self.store.get(cached.id)
                servable = FactFilter(verified=True, category=category)
                if current is not None and servable.matches(current):
                    return await self.record_serve(cached.id, fact=current, now=now)
                logger.info("Cached daily fact no longer servable", fact_id=cached.id)

        day_start = datetime.combine(now.date(), time.min, tzinfo=UTC)
        fact = await self.store.find_one(
            FactFilter(
                verified=True,
                category=category,
                publish_from=day_start,
                publish_to=day_start + timedelta(days=1),
            )
        )
        if fact is None:
            logger.debug("No fact scheduled for today", category=category)
            fact = await self._select_random(category, now)
        if fact is None or fact.id is None:
            raise FactNotFoundError(category=category)

        if self.cache is not None:
            await self.cache.set_daily_fact(fact, category, now=now)
        return await self.record_serve(fact.id, fact=fact, now=now)

    async def find_random_fact(self, category: str | None = None) -> ProcessedFact:
        """Get a random fact, preferring ones not served recently.

        Args:
            category: Optional category restriction

        Returns:
            Random fact (with the serve recorded)

        Raises:
            FactNotFoundError: If no verified fact matches
        """
        now = datetime.now(UTC)
        fact = await self._select_random(category, now)
        if fact is None or fact.id is None:
            raise FactNotFoundError(category=category)
        return await self.record_serve(fact.id, fact=fact, now=now)

    async def record_serve(
        self,
        fact_id: str,
        fact: ProcessedFact | None = None,
        now: datetime | None = None,
    ) -> ProcessedFact:
        """Record that a fact was served.

        Updates ``last_served_at``/``serve_count`` in the store and bumps the
        Redis serve counter.

        Args:
            fact_id: Served fact ID
            fact: Served fact (loaded from the store if omitted)
            now: Serve time (defaults to UTC now)

        Returns:
            The fact with serve fields updated

        Raises:
            RecordNotFoundError: If the fact does not exist
        """
        now = now or datetime.now(UTC)
        await self.store.update_metadata(fact_id, last_served=now, serve_count_increment=1)
        if self.cache is not None:
            await self.cache.increment_serve_count(fact_id)

        if fact is None:
            fact = await self.store.get(fact_id)
            if fact is None:
                raise RecordNotFoundError("Fact", fact_id)
            return fact
        return fact.model_copy(
            update={"last_served_at": now, "serve_count": fact.serve_count + 1}
        )

    async def search_facts(
        self,
        query: str | None = None,
        category: str | None = None,
        tag: str | None = None,
        limit: int = 20,
        skip: int = 0,
    ) -> list[ProcessedFact]:
        """Search verified facts, best score first.

        Args:
            query: Free-text query over content, category, tags and metadata
            category: Category restriction
            tag: Tag restriction
            limit: Maximum results
            skip: Results to skip

        Returns:
            Matching facts
        """
        return await self.store.find_many(
            FactFilter(
                verified=True,
                search=query or None,
                category=category or None,
                tag=tag.strip().lower() if tag else None,
            ),
            limit=limit,
            skip=skip,
            sort_by_score=True,
        )

    async def list_by_category(
        self, category: str, limit: int = 20, skip: int = 0
    ) -> list[ProcessedFact]:
        """List verified facts in a category, newest first."""
        return await self.store.find_many(
            FactFilter(verified=True, category=category), limit=limit, skip=skip
        )

    async def categories(self) -> list[str]:
        """Categories that have at least one verified fact."""
        return await self.store.categories()

    async def get_fact(self, fact_id: str) -> ProcessedFact:
        """Get a fact by ID.

        Raises:
            FactNotFoundError: If the fact does not exist
        """
        fact = await self.store.get(fact_id)
        if fact is None:
            raise FactNotFoundError(f"Fact {fact_id} not found", fact_id=fact_id)
        return fact

    # ============================================
    # Admin
    # ============================================

    async def create_fact(
        self,
        content: str,
        category: str = "",
        tags: list[str] | None = None,
        urls: list[str] | None = None,
        metadata: dict[str, str] | None = None,
        source: str = ADMIN_SOURCE,
        publish_date: datetime | None = None,
    ) -> ProcessedFact:
        """Create a fact manually.

        Admin facts skip the content heuristics but must respect the length
        window. They are normalized, scored and marked verified.

        Raises:
            ContentValidationError: If the content length is out of range
            RecordAlreadyExistsError: If the fact is a duplicate
        """
        normalizer = self.processor.normalizer
        text = self._validated_content(content)
        raw = RawRecord(
            content=text,
            source=source,
            category=category,
            tags=tags or [],
            urls=urls or [],
            metadata=metadata or {},
        )
        now = datetime.now(UTC)
        fact = ProcessedFact(
            content=text,
            source=source,
            category=normalizer.normalize_category(category),
            tags=normalizer.normalize_tags(raw.tags),
            urls=list(raw.urls),
            metadata=dict(raw.metadata),
            verified=True,
            score=self.processor.score(raw),
            content_hash=normalizer.content_hash(text),
            created_at=now,
            updated_at=now,
            publish_date=publish_date or now + self.processor.config.publish_delay,
        )
        stored = await self.store.insert(fact)
        logger.info("Fact created", fact_id=stored.id, category=stored.category)
        return stored

    async def update_fact(self, fact_id: str, changes: dict[str, Any]) -> ProcessedFact:
        """Update a fact.

        Content, category and tags are normalized; a content change also
        recomputes the content hash.

        Raises:
            FactNotFoundError: If the fact does not exist
            ContentValidationError: If new content is out of range
            RecordAlreadyExistsError: If new content duplicates another fact
        """
        normalizer = self.processor.normalizer
        updates = {k: v for k, v in changes.items() if v is not None}
        if "content" in updates:
            updates["content"] = self._validated_content(updates["content"])
            updates["content_hash"] = normalizer.content_hash(updates["content"])
        if "category" in updates:
            updates["category"] = normalizer.normalize_category(updates["category"])
        if "tags" in updates:
            updates["tags"] = normalizer.normalize_tags(updates["tags"])

        try:
            fact = await self.store.update(fact_id, updates)
        except RecordNotFoundError as e:
            raise FactNotFoundError(f"Fact {fact_id} not found", fact_id=fact_id) from e
        logger.info("Fact updated", fact_id=fact_id, fields=sorted(updates))
        return fact

    async def delete_fact(self, fact_id: str) -> None:
        """Delete a fact.

        Raises:
            FactNotFoundError: If the fact does not exist
        """
        try:
            await self.store.delete(fact_id)
        except RecordNotFoundError as e:
            raise FactNotFoundError(f"Fact {fact_id} not found", fact_id=fact_id) from e
        logger.info("Fact deleted", fact_id=fact_id)

    # ============================================
    # Helpers
    # ============================================

    async def _select_random(self, category: str | None, now: datetime) -> ProcessedFact | None:
        fact = await self.store.find_one(
            FactFilter(
                verified=True,
                category=category,
                not_served_since=now - RECENTLY_SERVED_WINDOW,
            ),
            random=True,
        )
        if fact is None:
            fact = await self.store.find_one(
                FactFilter(verified=True, category=category), random=True
            )
        return fact

    def _validated_content(self, content: str) -> str:
        config = self.processor.config
        text = self.processor.normalizer.normalize_text(content)
        if not config.min_length <= len(text) <= config.max_length:
            raise ContentValidationError(
                "Fact content length out of range",
                validation_errors=[
                    f"length {len(text)} not in [{config.min_length}, {config.max_length}]"
                ],
            )
        return text


__all__ = ["FactService", "RECENTLY_SERVED_WINDOW"]
