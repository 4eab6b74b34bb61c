"""SQLAlchemy ORM models."""

from onefact.models.base import Base, TimestampMixin, UUIDMixin
from onefact.models.fact import Fact

__all__ = [
    "Base",
    "UUIDMixin",
    "TimestampMixin",
    "Fact",
]
