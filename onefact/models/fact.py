"""Fact ORM model.

This module defines the Fact model for collected, validated and served facts.
"""

from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Float,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from onefact.models.base import Base, TimestampMixin, UUIDMixin


# Joins indexed values; never appears in fact text
SEARCH_SEPARATOR = "\x1f"


def build_search_text(
    content: str, category: str, tags: list[str], metadata: dict[str, str]
) -> str:
    """Lowercased searchable values: content, category, tags and metadata values."""
    values = [content, category, *tags, *(str(v) for v in metadata.values())]
    return SEARCH_SEPARATOR.join(value.lower() for value in values)


def build_tag_text(tags: list[str]) -> str:
    """Lowercased tags wrapped in separators so a tag matches only as a whole."""
    return SEARCH_SEPARATOR + "".join(f"{tag.lower()}{SEARCH_SEPARATOR}" for tag in tags)


class Fact(Base, UUIDMixin, TimestampMixin):
    """Validated fact ready for serving.

    Attributes:
        content: Fact body (50-500 characters)
        source: Name of the source that produced the fact
        category: Category from the fixed taxonomy
        tags: Normalized lowercase tags
        urls: Reference URLs
        fact_metadata: Free-form string metadata (column ``metadata``)
        verified: Whether the fact passed validation
        score: Quality score at creation
        content_hash: SHA-256 of normalized content for deduplication
        publish_date: Scheduled date for the daily slot
        last_served_at: Last time the fact was served
        serve_count: Number of times the fact was served
        search_text: Lowercased searchable values joined by SEARCH_SEPARATOR
        tag_text: Lowercased tags, each wrapped in SEARCH_SEPARATOR
    """

    __tablename__ = "facts"

    # Content
    content: Mapped[str] = mapped_column(Text, nullable=False)
    source: Mapped[str] = mapped_column(String(100), nullable=False, index=True)

    # Classification
    category: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    urls: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    fact_metadata: Mapped[dict[str, str]] = mapped_column(
        "metadata", JSON, nullable=False, default=dict
    )

    # Quality
    verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False, index=True)
    score: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    # Deduplication
    content_hash: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)

    # Serving
    publish_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, index=True
    )
    last_served_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    serve_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Search (derived from the fields above, kept in sync by refresh_search_columns)
    search_text: Mapped[str] = mapped_column(Text, nullable=False, default="")
    tag_text: Mapped[str] = mapped_column(Text, nullable=False, default="")

    __table_args__ = (Index("idx_fact_category_verified", "category", "verified"),)

    def refresh_search_columns(self) -> None:
        """Recompute search_text and tag_text from the current field values."""
        tags = list(self.tags or [])
        self.search_text = build_search_text(
            self.content, self.category, tags, dict(self.fact_metadata or {})
        )
        self.tag_text = build_tag_text(tags)

    def __repr__(self) -> str:
        """String representation."""
        return f"<Fact(id={self.id}, category={self.category}, content={self.content[:50]})>"


__all__ = [
    "SEARCH_SEPARATOR",
    "Fact",
    "build_search_text",
    "build_tag_text",
]
