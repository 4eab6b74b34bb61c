"""In-memory fact store.

Keeps facts in a dict guarded by an asyncio.Lock. Used in tests and for
single-process deployments without a database (``FACT_STORE=memory``).
"""

import asyncio
import random as random_module
import uuid
from datetime import UTC, datetime
from typing import Any

from onefact.core.exceptions import RecordAlreadyExistsError, RecordNotFoundError
from onefact.core.logging import get_logger
from onefact.services.collector.base import ProcessedFact
from onefact.services.store.base import UPDATABLE_FIELDS, FactFilter, FactStore

logger = get_logger(__name__)


class InMemoryFactStore(FactStore):
    """Dict-backed FactStore with content-hash uniqueness."""

    def __init__(self) -> None:
        self._facts: dict[str, ProcessedFact] = {}
        self._hashes: dict[str, str] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._facts)

    async def insert(self, fact: ProcessedFact) -> ProcessedFact:
        async with self._lock:
            if fact.content_hash in self._hashes:
                raise RecordAlreadyExistsError("Fact", "content_hash", fact.content_hash)
            stored = fact.model_copy(update={"id": str(uuid.uuid4())}, deep=True)
            self._facts[stored.id] = stored
            self._hashes[stored.content_hash] = stored.id
        logger.debug("Fact stored", fact_id=stored.id, source=stored.source)
        return stored.model_copy(deep=True)

    async def find_one(self, filter: FactFilter, random: bool = False) -> ProcessedFact | None:
        async with self._lock:
            matches = self._matching(filter)
        if not matches:
            return None
        chosen = random_module.choice(matches) if random else matches[0]
        return chosen.model_copy(deep=True)

    async def find_many(
        self,
        filter: FactFilter,
        limit: int = 20,
        skip: int = 0,
        sort_by_score: bool = False,
    ) -> list[ProcessedFact]:
        async with self._lock:
            matches = self._matching(filter)
        if sort_by_score:
            matches.sort(key=lambda f: f.score, reverse=True)
        return [f.model_copy(deep=True) for f in matches[skip : skip + limit]]

    async def update_metadata(
        self,
        fact_id: str,
        last_served: datetime,
        serve_count_increment: int = 1,
    ) -> None:
        async with self._lock:
            fact = self._require(fact_id)
            fact.last_served_at = last_served
            fact.serve_count += serve_count_increment

    async def get(self, fact_id: str) -> ProcessedFact | None:
        async with self._lock:
            fact = self._facts.get(fact_id)
        return fact.model_copy(deep=True) if fact else None

    async def update(self, fact_id: str, changes: dict[str, Any]) -> ProcessedFact:
        updates = {k: v for k, v in changes.items() if k in UPDATABLE_FIELDS}
        async with self._lock:
            fact = self._require(fact_id)
            new_hash = updates.get("content_hash")
            if new_hash and new_hash != fact.content_hash:
                if new_hash in self._hashes:
                    raise RecordAlreadyExistsError("Fact", "content_hash", new_hash)
                del self._hashes[fact.content_hash]
                self._hashes[new_hash] = fact_id
            updates["updated_at"] = datetime.now(UTC)
            updated = fact.model_copy(update=updates, deep=True)
            self._facts[fact_id] = updated
        return updated.model_copy(deep=True)

    async def delete(self, fact_id: str) -> None:
        async with self._lock:
            fact = self._require(fact_id)
            del self._facts[fact_id]
            self._hashes.pop(fact.content_hash, None)

    async def categories(self) -> list[str]:
        async with self._lock:
            return sorted({f.category for f in self._facts.values() if f.verified})

    def _matching(self, filter: FactFilter) -> list[ProcessedFact]:
        """Matching facts, newest first. Caller holds the lock."""
        matches = [f for f in self._facts.values() if filter.matches(f)]
        matches.sort(key=lambda f: f.created_at, reverse=True)
        return matches

    def _require(self, fact_id: str) -> ProcessedFact:
        fact = self._facts.get(fact_id)
        if fact is None:
            raise RecordNotFoundError("Fact", fact_id)
        return fact


__all__ = ["InMemoryFactStore"]
