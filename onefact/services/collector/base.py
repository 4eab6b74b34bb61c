"""Base interfaces and DTOs for fact collection.

This module defines the core data structures and abstract interfaces
used throughout the fact collection pipeline.
"""

import re
from abc import ABC, abstractmethod
from datetime import UTC, datetime
from typing import Any, ClassVar, Generic, Literal, TypeVar

import httpx
from pydantic import BaseModel, ConfigDict, Field

from onefact.core.exceptions import CollectionRunError, SourceFetchError
from onefact.infrastructure.http_client import HTTPClient

ConfigT = TypeVar("ConfigT", bound=BaseModel)

MIN_EXTRACT_LENGTH = 50
MAX_EXTRACT_LENGTH = 500

_WHITESPACE = re.compile(r"\s+")
_TERMINAL_PUNCTUATION = (".", "!", "?")


def _utcnow() -> datetime:
    return datetime.now(UTC)


class RawRecord(BaseModel):
    """Unvalidated fact candidate from an external source.

    Created by a source adapter per fetch and consumed once by the
    processor.

    Attributes:
        content: Fact body text
        source: Name of the producing source
        category: Free-text category (may be empty)
        tags: Source tags (may be empty)
        urls: Reference URLs (may be empty)
        metadata: Source-specific string metadata
        collected_at: When the record was fetched
    """

    model_config = ConfigDict(frozen=True)

    content: str
    source: str
    category: str = ""
    tags: list[str] = Field(default_factory=list)
    urls: list[str] = Field(default_factory=list)
    metadata: dict[str, str] = Field(default_factory=dict)
    collected_at: datetime = Field(default_factory=_utcnow)


class ProcessedFact(BaseModel):
    """Validated, scored and normalized fact.

    Attributes:
        id: Store-assigned identifier (None until persisted)
        content: Normalized fact body
        source: Producing source name
        category: Category from the fixed taxonomy
        tags: Deduplicated lowercase tags
        urls: Reference URLs
        metadata: Source-specific string metadata
        verified: True only for facts that passed validation
        score: Quality score at creation
        content_hash: Deduplication hash of normalized content
        created_at: Creation time
        updated_at: Last modification time
        publish_date: Scheduled date for the daily slot
        last_served_at: Last serve time
        serve_count: Number of serves
    """

    id: str | None = None
    content: str
    source: str
    category: str
    tags: list[str] = Field(default_factory=list)
    urls: list[str] = Field(default_factory=list)
    metadata: dict[str, str] = Field(default_factory=dict)
    verified: bool = False
    score: float = 0.0
    content_hash: str
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)
    publish_date: datetime
    last_served_at: datetime | None = None
    serve_count: int = Field(default=0, ge=0)


class BaseSource(ABC, Generic[ConfigT]):
    """Abstract base class for all fact sources.

    Each source type (Wikipedia, NASA APOD, etc.) implements this interface
    to provide a consistent collection API.

    Attributes:
        name: Registry name of the source
    """

    name: ClassVar[str] = ""

    def __init__(self, config: ConfigT, http_client: HTTPClient) -> None:
        """Initialize source.

        Args:
            config: Typed source configuration
            http_client: Shared HTTP client
        """
        self._config = config
        self._http_client = http_client

    @property
    def config(self) -> ConfigT:
        """Source configuration."""
        return self._config

    @classmethod
    @abstractmethod
    def build_config(cls, overrides: dict[str, Any]) -> ConfigT:
        """Build the typed config from override values.

        Args:
            overrides: Configuration overrides

        Returns:
            Config instance
        """

    @abstractmethod
    async def get_facts(self) -> list[RawRecord]:
        """Fetch raw fact records from the source.

        Returns:
            Records in fetch order (possibly empty)

        Raises:
            SourceFetchError: If the primary request fails
        """

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if source is accessible and healthy.

        Returns:
            True if source is healthy, False otherwise
        """

    async def _fetch_json(self, url: str, params: dict[str, Any] | None = None) -> Any:
        """GET a JSON document using the source's request timeout.

        Args:
            url: Request URL
            params: Query parameters

        Returns:
            Decoded JSON body

        Raises:
            SourceFetchError: On network failure, non-2xx status or bad JSON
        """
        timeout = getattr(self._config, "request_timeout", None)
        try:
            response = await self._http_client.get(url, params=params, timeout=timeout)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise SourceFetchError(
                self.name,
                f"HTTP {e.response.status_code}",
                status_code=e.response.status_code,
                endpoint=url,
            ) from e
        except httpx.HTTPError as e:
            raise SourceFetchError(self.name, f"request failed: {e}", endpoint=url) from e

        try:
            return response.json()
        except ValueError as e:
            raise SourceFetchError(self.name, f"malformed JSON: {e}", endpoint=url) from e

    @staticmethod
    def clean_extract(
        text: str | None,
        min_length: int = MIN_EXTRACT_LENGTH,
        max_length: int = MAX_EXTRACT_LENGTH,
    ) -> str | None:
        """Apply the shared source-level extract policy.

        Collapses whitespace, appends a period when terminal punctuation
        is missing and discards text outside the length window.

        Args:
            text: Raw extract
            min_length: Minimum accepted length
            max_length: Maximum accepted length

        Returns:
            Cleaned text, or None if it falls outside the window
        """
        if not text:
            return None
        cleaned = _WHITESPACE.sub(" ", text).strip()
        if not cleaned:
            return None
        if not cleaned.endswith(_TERMINAL_PUNCTUATION):
            cleaned += "."
        if not min_length <= len(cleaned) <= max_length:
            return None
        return cleaned


class SourceOutcome(BaseModel):
    """Per-source result of one collection pass.

    Attributes:
        name: Source name
        fetched: Records returned by the source
        accepted: Records accepted by the processor
        error: Failure message if the source failed
    """

    name: str
    fetched: int = 0
    accepted: int = 0
    error: str | None = None


class CollectionFault(BaseModel):
    """A single failure recorded during a pass.

    Attributes:
        kind: "source" for fetch failures, "store" for write failures
        source: Source the failure is attributed to
        message: Failure description
    """

    kind: Literal["source", "store"]
    source: str
    message: str

    def __str__(self) -> str:
        return f"{self.kind} {self.source}: {self.message}"


class CollectionRun(BaseModel):
    """Result of one collection pass.

    Attributes:
        started_at: Pass start time
        completed_at: Pass end time (None while running)
        sources: Per-source outcomes
        fetched_count: Records fetched across all sources
        accepted_count: Records accepted by the processor
        stored_count: Facts persisted
        duplicate_count: Facts rejected by the store as duplicates
        faults: Source and store failures
    """

    started_at: datetime = Field(default_factory=_utcnow)
    completed_at: datetime | None = None
    sources: list[SourceOutcome] = Field(default_factory=list)
    fetched_count: int = 0
    accepted_count: int = 0
    stored_count: int = 0
    duplicate_count: int = 0
    faults: list[CollectionFault] = Field(default_factory=list)

    @property
    def fault_count(self) -> int:
        """Number of source faults plus store faults."""
        return len(self.faults)

    @property
    def ok(self) -> bool:
        """True when the pass had no faults."""
        return not self.faults

    @property
    def duration_seconds(self) -> float:
        """Pass duration, or 0.0 while running."""
        if self.completed_at is None:
            return 0.0
        return (self.completed_at - self.started_at).total_seconds()

    def to_error(self) -> CollectionRunError | None:
        """Summarize faults as an aggregate error.

        Returns:
            CollectionRunError, or None if the pass had no faults
        """
        if self.ok:
            return None
        return CollectionRunError(
            [str(fault) for fault in self.faults],
            source_faults=sum(1 for f in self.faults if f.kind == "source"),
            store_faults=sum(1 for f in self.faults if f.kind == "store"),
        )


__all__ = [
    "RawRecord",
    "ProcessedFact",
    "BaseSource",
    "SourceOutcome",
    "CollectionFault",
    "CollectionRun",
    "MIN_EXTRACT_LENGTH",
    "MAX_EXTRACT_LENGTH",
]
