"""Fact store contract.

Defines the persistence interface shared by the collection pipeline
(writes) and the serving layer (reads and serve bookkeeping).
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

from pydantic import BaseModel

from onefact.services.collector.base import ProcessedFact

# Fields an admin update may change
UPDATABLE_FIELDS = frozenset(
    {
        "content",
        "content_hash",
        "category",
        "tags",
        "urls",
        "metadata",
        "verified",
        "score",
        "publish_date",
    }
)


def _meta_equals(fact: ProcessedFact, key: str, value: str) -> bool:
    return fact.metadata.get(key, "").lower() == value.lower()


class FactFilter(BaseModel):
    """Query filter for facts.

    All set fields must match. String matching is case-insensitive.

    Attributes:
        verified: Match verification flag
        category: Exact category
        tag: Tag contained in the fact's tags
        search: Substring of content, category, a tag or a metadata value
        difficulty: ``metadata["difficulty"]`` value
        language: ``metadata["language"]`` value
        not_served_since: Exclude facts served after this instant
        publish_from: Inclusive lower bound on publish date
        publish_to: Exclusive upper bound on publish date
    """

    verified: bool | None = None
    category: str | None = None
    tag: str | None = None
    search: str | None = None
    difficulty: str | None = None
    language: str | None = None
    not_served_since: datetime | None = None
    publish_from: datetime | None = None
    publish_to: datetime | None = None

    def matches(self, fact: ProcessedFact) -> bool:
        """Check a fact against the filter in memory.

        Args:
            fact: Fact to check

        Returns:
            True if every set criterion matches
        """
        if self.verified is not None and fact.verified != self.verified:
            return False
        if self.category and fact.category.lower() != self.category.lower():
            return False
        if self.tag and self.tag.lower() not in (t.lower() for t in fact.tags):
            return False
        if self.difficulty and not _meta_equals(fact, "difficulty", self.difficulty):
            return False
        if self.language and not _meta_equals(fact, "language", self.language):
            return False
        if (
            self.not_served_since
            and fact.last_served_at
            and fact.last_served_at > self.not_served_since
        ):
            return False
        if self.publish_from and fact.publish_date < self.publish_from:
            return False
        if self.publish_to and fact.publish_date >= self.publish_to:
            return False
        if self.search:
            needle = self.search.lower()
            haystack = [fact.content, fact.category, *fact.tags, *fact.metadata.values()]
            if not any(needle in value.lower() for value in haystack):
                return False
        return True


class FactStore(ABC):
    """Abstract fact persistence.

    Implementations own their concurrency safety. ``insert`` enforces
    content-hash uniqueness and raises RecordAlreadyExistsError on a
    duplicate.
    """

    @abstractmethod
    async def insert(self, fact: ProcessedFact) -> ProcessedFact:
        """Persist a new fact.

        Args:
            fact: Fact to store (``id`` is ignored)

        Returns:
            Stored fact with its assigned id

        Raises:
            RecordAlreadyExistsError: If a fact with the same content hash exists
            DatabaseError: On other persistence failures
        """

    @abstractmethod
    async def find_one(self, filter: FactFilter, random: bool = False) -> ProcessedFact | None:
        """Find a single matching fact.

        Args:
            filter: Query filter
            random: Pick uniformly among matches instead of the newest

        Returns:
            Matching fact or None
        """

    @abstractmethod
    async def find_many(
        self,
        filter: FactFilter,
        limit: int = 20,
        skip: int = 0,
        sort_by_score: bool = False,
    ) -> list[ProcessedFact]:
        """Find matching facts.

        Args:
            filter: Query filter
            limit: Maximum results
            skip: Results to skip
            sort_by_score: Order by score descending instead of newest first

        Returns:
            Matching facts
        """

    @abstractmethod
    async def update_metadata(
        self,
        fact_id: str,
        last_served: datetime,
        serve_count_increment: int = 1,
    ) -> None:
        """Record a serve.

        Args:
            fact_id: Fact ID
            last_served: Serve time
            serve_count_increment: Amount added to serve_count

        Raises:
            RecordNotFoundError: If the fact does not exist
        """

    @abstractmethod
    async def get(self, fact_id: str) -> ProcessedFact | None:
        """Get a fact by ID, or None."""

    @abstractmethod
    async def update(self, fact_id: str, changes: dict[str, Any]) -> ProcessedFact:
        """Apply admin changes to a fact.

        Args:
            fact_id: Fact ID
            changes: Field values keyed by name (see UPDATABLE_FIELDS)

        Returns:
            Updated fact

        Raises:
            RecordNotFoundError: If the fact does not exist
            RecordAlreadyExistsError: If new content collides with another fact
        """

    @abstractmethod
    async def delete(self, fact_id: str) -> None:
        """Delete a fact.

        Raises:
            RecordNotFoundError: If the fact does not exist
        """

    @abstractmethod
    async def categories(self) -> list[str]:
        """Distinct categories of verified facts, sorted."""

    async def close(self) -> None:
        """Release resources."""


__all__ = [
    "FactFilter",
    "FactStore",
    "UPDATABLE_FIELDS",
]
