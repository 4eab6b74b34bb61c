"""Fact collection services.

This package implements the fact collection pipeline:
1. Source adapters fetch raw records from external APIs
2. Processor validates and scores records
3. Normalizer maps categories and tags onto canonical forms
4. Pipeline fans sources into a single store writer
"""

from onefact.config import CollectionConfig, ProcessorConfig, ScoringConfig, ScoringWeights
from onefact.services.collector.base import (
    BaseSource,
    CollectionFault,
    CollectionRun,
    ProcessedFact,
    RawRecord,
    SourceOutcome,
)
from onefact.services.collector.normalizer import FactNormalizer
from onefact.services.collector.pipeline import FactCollectionPipeline
from onefact.services.collector.processor import FactProcessor, ProcessingResult, RejectionReason

__all__ = [
    # Base DTOs
    "RawRecord",
    "ProcessedFact",
    "SourceOutcome",
    "CollectionFault",
    "CollectionRun",
    # Interfaces
    "BaseSource",
    # Services
    "FactNormalizer",
    "FactProcessor",
    "ProcessingResult",
    "RejectionReason",
    "FactCollectionPipeline",
    # Config
    "CollectionConfig",
    "ProcessorConfig",
    "ScoringConfig",
    "ScoringWeights",
]
