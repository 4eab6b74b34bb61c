"""Shared column mixins for OneFact ORM models.

- UUIDMixin: UUID primary key, exposed to the API as a string
- TimestampMixin: created_at/updated_at, always read back in UTC

SQLite (used by the tests) returns naive datetimes even for
``DateTime(timezone=True)`` columns; ``as_utc`` restores the zone.
"""

import uuid
from datetime import UTC, datetime

from sqlalchemy import DateTime, func
from sqlalchemy.orm import Mapped, declared_attr, mapped_column

from onefact.core.database import Base


def as_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to a naive datetime; aware values pass through."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class UUIDMixin:
    """UUID primary key generated on insert.

    Fact IDs travel through the API and the cache as strings; ``parse_id``
    turns them back into keys.
    """

    @declared_attr
    @classmethod
    def id(cls) -> Mapped[uuid.UUID]:
        return mapped_column(primary_key=True, default=uuid.uuid4)

    @staticmethod
    def parse_id(value: str) -> uuid.UUID | None:
        """Parse a string ID, returning None when it is not a UUID."""
        try:
            return uuid.UUID(str(value))
        except ValueError:
            return None


class TimestampMixin:
    """created_at and updated_at columns.

    Both default to the database clock. Writers that import facts with a
    known creation time set them explicitly.
    """

    @declared_attr
    @classmethod
    def created_at(cls) -> Mapped[datetime]:
        return mapped_column(DateTime(timezone=True), nullable=False, server_default=func.now())

    @declared_attr
    @classmethod
    def updated_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True),
            nullable=False,
            server_default=func.now(),
            onupdate=func.now(),
        )

    def touch(self, now: datetime | None = None) -> None:
        """Stamp updated_at (the ORM hook only fires for flushed column changes)."""
        self.updated_at = now or datetime.now(UTC)


__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    "as_utc",
]
