"""Fact persistence."""

from onefact.services.store.base import UPDATABLE_FIELDS, FactFilter, FactStore
from onefact.services.store.memory import InMemoryFactStore
from onefact.services.store.sql import SqlFactStore

__all__ = [
    "FactFilter",
    "FactStore",
    "InMemoryFactStore",
    "SqlFactStore",
    "UPDATABLE_FIELDS",
]
