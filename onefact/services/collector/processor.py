"""Fact validation and scoring service.

Turns a RawRecord into a ProcessedFact or rejects it:
1. Normalize body text
2. Length window check
3. Banned word and marker word checks
4. Additive quality score against a threshold
5. Category/tag normalization and content hashing on acceptance

Rejection is a normal outcome, not an error: ``process`` returns None and
the reason is logged at debug level.
"""

from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel

from onefact.config import ProcessorConfig, ScoringConfig
from onefact.core.logging import get_logger
from onefact.services.collector.base import ProcessedFact, RawRecord
from onefact.services.collector.normalizer import FactNormalizer

logger = get_logger(__name__)


class RejectionReason(str, Enum):
    """Reason a record was rejected."""

    LENGTH = "length"
    BANNED_WORD = "banned_word"
    MISSING_MARKER = "missing_marker"
    LOW_SCORE = "low_score"


class ProcessingResult(BaseModel):
    """Outcome of evaluating one record.

    Attributes:
        fact: Processed fact if accepted
        reason: Rejection reason if rejected
        score: Quality score (None when rejected before scoring)
        detail: Extra context for the rejection (offending word, length)
    """

    fact: ProcessedFact | None = None
    reason: RejectionReason | None = None
    score: float | None = None
    detail: str | None = None

    @property
    def accepted(self) -> bool:
        """Whether the record was accepted."""
        return self.fact is not None


def _find_word(content: str, words: list[str]) -> str | None:
    """Return the first word contained in content (case-insensitive substring)."""
    lowered = content.lower()
    return next((word for word in words if word in lowered), None)


class FactProcessor:
    """Validates, scores and normalizes raw fact records.

    Scoring formula (additive):
        score = baseline
              + sweet-spot length bonus / extreme length penalty
              + category bonus
              + tag bonuses
              + URL bonus
              + metadata bonuses

    Example:
        >>> processor = FactProcessor()
        >>> fact = processor.process(raw_record)
        >>> if fact is None:
        ...     print("rejected")
    """

    def __init__(
        self,
        config: ProcessorConfig | None = None,
        scoring: ScoringConfig | None = None,
        normalizer: FactNormalizer | None = None,
    ) -> None:
        """Initialize processor.

        Args:
            config: Validation rules (uses defaults if not provided)
            scoring: Scoring configuration (uses defaults if not provided)
            normalizer: Category/tag normalizer
        """
        self.config = config or ProcessorConfig()
        self.scoring = scoring or ScoringConfig()
        self.normalizer = normalizer or FactNormalizer()

    def process(self, raw: RawRecord) -> ProcessedFact | None:
        """Process a raw record.

        Args:
            raw: Record from a source

        Returns:
            ProcessedFact if accepted, None if rejected
        """
        return self.evaluate(raw).fact

    def evaluate(self, raw: RawRecord) -> ProcessingResult:
        """Evaluate a raw record and report why it was rejected.

        Args:
            raw: Record from a source

        Returns:
            ProcessingResult with the fact or the rejection reason
        """
        content = self.normalizer.normalize_text(raw.content)
        length = len(content)

        if not self.config.min_length <= length <= self.config.max_length:
            return self._reject(raw, RejectionReason.LENGTH, detail=str(length))

        banned = _find_word(content, self.config.banned_words)
        if banned is not None:
            return self._reject(raw, RejectionReason.BANNED_WORD, detail=banned)

        if self.config.marker_words and _find_word(content, self.config.marker_words) is None:
            return self._reject(raw, RejectionReason.MISSING_MARKER)

        score = self.score(raw, length)
        if score < self.scoring.threshold:
            return self._reject(raw, RejectionReason.LOW_SCORE, score=score)

        now = datetime.now(UTC)
        fact = ProcessedFact(
            content=content,
            source=raw.source,
            category=self.normalizer.normalize_category(raw.category),
            tags=self.normalizer.normalize_tags(raw.tags),
            urls=list(raw.urls),
            metadata=dict(raw.metadata),
            verified=True,
            score=score,
            content_hash=self.normalizer.content_hash(content),
            created_at=now,
            updated_at=now,
            publish_date=now + self.config.publish_delay,
        )
        return ProcessingResult(fact=fact, score=score)

    def score(self, raw: RawRecord, length: int | None = None) -> float:
        """Calculate the additive quality score.

        Args:
            raw: Record to score
            length: Normalized content length (computed if omitted)

        Returns:
            Score rounded to 4 decimals
        """
        cfg = self.scoring
        weights = cfg.weights
        if length is None:
            length = len(self.normalizer.normalize_text(raw.content))

        score = cfg.baseline

        if cfg.sweet_spot_min <= length <= cfg.sweet_spot_max:
            score += weights.length_sweet_spot_bonus
        elif length < cfg.short_length or length > cfg.long_length:
            score -= weights.length_extreme_penalty

        if raw.category.strip():
            score += weights.category_bonus

        if raw.tags:
            score += weights.tags_present_bonus
            if len(raw.tags) >= cfg.rich_tag_count:
                score += weights.tags_rich_bonus

        if raw.urls:
            score += weights.urls_bonus

        if raw.metadata:
            score += weights.metadata_present_bonus
            if len(raw.metadata) >= cfg.rich_metadata_count:
                score += weights.metadata_rich_bonus

        return round(score, 4)

    def _reject(
        self,
        raw: RawRecord,
        reason: RejectionReason,
        score: float | None = None,
        detail: str | None = None,
    ) -> ProcessingResult:
        logger.debug(
            "Fact rejected",
            source=raw.source,
            reason=reason.value,
            score=score,
            detail=detail,
            content=raw.content[:50],
        )
        return ProcessingResult(reason=reason, score=score, detail=detail)


__all__ = [
    "FactProcessor",
    "ProcessingResult",
    "RejectionReason",
]
