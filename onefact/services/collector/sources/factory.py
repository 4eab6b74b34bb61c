"""Source factory for dynamic source instantiation.

This module provides a factory pattern for creating fact sources
based on configuration, enabling config-driven source selection.
"""

from typing import Any

from onefact.core.config import Config, get_config
from onefact.core.logging import get_logger
from onefact.infrastructure.http_client import HTTPClient
from onefact.services.collector.base import BaseSource
from onefact.services.collector.sources.nasa_apod import NasaApodSource
from onefact.services.collector.sources.numbers_api import NumbersApiSource
from onefact.services.collector.sources.today_in_history import TodayInHistorySource
from onefact.services.collector.sources.useless_facts import UselessFactsSource
from onefact.services.collector.sources.wikipedia import WikipediaSource

logger = get_logger(__name__)

# Source name to class mapping
SOURCE_CLASSES: dict[str, type[BaseSource[Any]]] = {
    WikipediaSource.name: WikipediaSource,
    NasaApodSource.name: NasaApodSource,
    NumbersApiSource.name: NumbersApiSource,
    UselessFactsSource.name: UselessFactsSource,
    TodayInHistorySource.name: TodayInHistorySource,
}


def get_source_class(source_name: str) -> type[BaseSource[Any]] | None:
    """Get the source class for a given source name.

    Args:
        source_name: Name of the source (e.g., "wikipedia", "nasa_apod")

    Returns:
        Source class or None if source type is unknown
    """
    return SOURCE_CLASSES.get(source_name.strip().lower())


def default_overrides(config: Config) -> dict[str, dict[str, Any]]:
    """Build per-source overrides from application config.

    Args:
        config: Application config

    Returns:
        Mapping of source name to config overrides
    """
    common = {"request_timeout": config.request_timeout}
    return {
        WikipediaSource.name: dict(common),
        NasaApodSource.name: {**common, "api_key": config.nasa_api_key},
        NumbersApiSource.name: dict(common),
        UselessFactsSource.name: dict(common),
        TodayInHistorySource.name: dict(common),
    }


def create_source(
    source_name: str,
    http_client: HTTPClient,
    overrides: dict[str, Any] | None = None,
) -> BaseSource[Any]:
    """Create a fact source instance from name and config overrides.

    Each Source class defines its own build_config() classmethod that knows
    how to construct the appropriate config from overrides.

    Args:
        source_name: Name of the source (e.g., "wikipedia")
        http_client: Shared HTTP client for connection reuse
        overrides: Configuration overrides

    Returns:
        Source instance

    Raises:
        ValueError: If source type is unknown
    """
    source_class = get_source_class(source_name)
    if source_class is None:
        raise ValueError(f"Unknown source type: {source_name}")

    config = source_class.build_config(overrides or {})
    return source_class(config=config, http_client=http_client)


def create_sources(
    http_client: HTTPClient,
    source_names: list[str] | None = None,
    config: Config | None = None,
    source_overrides: dict[str, dict[str, Any]] | None = None,
) -> list[BaseSource[Any]]:
    """Create all enabled sources.

    Unknown names are logged and skipped.

    Args:
        http_client: Shared HTTP client
        source_names: Names to create (defaults to ``Config.enabled_sources``)
        config: Application config (defaults to the global config)
        source_overrides: Extra per-source overrides

    Returns:
        Source instances in the requested order
    """
    config = config or get_config()
    names = source_names if source_names is not None else config.enabled_source_names
    overrides = default_overrides(config)
    for name, extra in (source_overrides or {}).items():
        overrides.setdefault(name, {}).update(extra)

    sources: list[BaseSource[Any]] = []
    for name in names:
        if get_source_class(name) is None:
            logger.warning("Skipping unknown source", source=name)
            continue
        sources.append(create_source(name, http_client, overrides.get(name.strip().lower())))

    logger.info("Sources created", sources=[s.name for s in sources])
    return sources


def get_all_source_names() -> list[str]:
    """Get all registered source names.

    Returns:
        List of source names
    """
    return list(SOURCE_CLASSES.keys())


__all__ = [
    "create_source",
    "create_sources",
    "default_overrides",
    "get_source_class",
    "get_all_source_names",
    "SOURCE_CLASSES",
]
