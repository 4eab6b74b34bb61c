"""Fact source implementations."""

from onefact.services.collector.sources.factory import (
    SOURCE_CLASSES,
    create_source,
    create_sources,
    get_all_source_names,
    get_source_class,
)
from onefact.services.collector.sources.nasa_apod import NasaApodSource
from onefact.services.collector.sources.numbers_api import NumbersApiSource
from onefact.services.collector.sources.today_in_history import TodayInHistorySource
from onefact.services.collector.sources.useless_facts import UselessFactsSource
from onefact.services.collector.sources.wikipedia import WikipediaSource

__all__ = [
    "WikipediaSource",
    "NasaApodSource",
    "NumbersApiSource",
    "UselessFactsSource",
    "TodayInHistorySource",
    "SOURCE_CLASSES",
    "create_source",
    "create_sources",
    "get_all_source_names",
    "get_source_class",
]
