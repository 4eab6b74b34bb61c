"""Typed configuration models for OneFact components."""

from onefact.config.content import (
    CollectionConfig,
    ProcessorConfig,
    ScoringConfig,
    ScoringWeights,
)
from onefact.config.sources import (
    NasaApodConfig,
    NumbersApiConfig,
    TodayInHistoryConfig,
    UselessFactsConfig,
    WikipediaConfig,
)

__all__ = [
    # Content
    "CollectionConfig",
    "ProcessorConfig",
    "ScoringConfig",
    "ScoringWeights",
    # Sources
    "NasaApodConfig",
    "NumbersApiConfig",
    "TodayInHistoryConfig",
    "UselessFactsConfig",
    "WikipediaConfig",
]
