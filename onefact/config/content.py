"""Content validation, scoring and collection configuration models.

Defines the rule tables used by the fact processor and the knobs of a
collection pass. Defaults reproduce the reference acceptance policy.
"""

from datetime import timedelta

from pydantic import BaseModel, Field, field_validator, model_validator

from onefact.config.validators import normalize_string_list, parse_duration

DEFAULT_BANNED_WORDS = [
    "died",
    "killed",
    "death",
    "murder",
    "suicide",
    "explicit",
    "nsfw",
    "graphic",
]

DEFAULT_MARKER_WORDS = ["the", "is", "are", "was", "were"]


class ScoringWeights(BaseModel):
    """Additive adjustments applied on top of the baseline score.

    Attributes:
        length_sweet_spot_bonus: Added when length is inside the sweet spot
        length_extreme_penalty: Subtracted when length is very short or very long
        category_bonus: Added when the record carries a category
        tags_present_bonus: Added when the record has at least one tag
        tags_rich_bonus: Added on top when tag count reaches ``rich_tag_count``
        urls_bonus: Added when the record has at least one reference URL
        metadata_present_bonus: Added when the record has any metadata
        metadata_rich_bonus: Added on top when metadata reaches ``rich_metadata_count``
    """

    length_sweet_spot_bonus: float = Field(default=0.2, ge=0.0, le=1.0)
    length_extreme_penalty: float = Field(default=0.2, ge=0.0, le=1.0)
    category_bonus: float = Field(default=0.1, ge=0.0, le=1.0)
    tags_present_bonus: float = Field(default=0.1, ge=0.0, le=1.0)
    tags_rich_bonus: float = Field(default=0.1, ge=0.0, le=1.0)
    urls_bonus: float = Field(default=0.2, ge=0.0, le=1.0)
    metadata_present_bonus: float = Field(default=0.1, ge=0.0, le=1.0)
    metadata_rich_bonus: float = Field(default=0.1, ge=0.0, le=1.0)


class ScoringConfig(BaseModel):
    """Fact quality scoring configuration.

    Scoring formula (additive):
        score = baseline + sum(applicable adjustments)

    Attributes:
        baseline: Starting score for every record
        threshold: Minimum score for acceptance
        sweet_spot_min: Lower bound of the favored length range
        sweet_spot_max: Upper bound of the favored length range
        short_length: Lengths below this are penalized
        long_length: Lengths above this are penalized
        rich_tag_count: Tag count that earns the rich-tags bonus
        rich_metadata_count: Metadata key count that earns the rich-metadata bonus
        weights: Adjustment table
    """

    baseline: float = Field(default=1.0, ge=0.0)
    threshold: float = Field(default=0.7, ge=0.0)
    sweet_spot_min: int = Field(default=200, ge=0)
    sweet_spot_max: int = Field(default=300, ge=0)
    short_length: int = Field(default=100, ge=0)
    long_length: int = Field(default=400, ge=0)
    rich_tag_count: int = Field(default=3, ge=1)
    rich_metadata_count: int = Field(default=3, ge=1)
    weights: ScoringWeights = Field(default_factory=ScoringWeights)

    @model_validator(mode="after")
    def validate_ranges(self) -> "ScoringConfig":
        """Ensure length ranges are ordered."""
        if self.sweet_spot_min > self.sweet_spot_max:
            raise ValueError("sweet_spot_min must not exceed sweet_spot_max")
        if self.short_length > self.long_length:
            raise ValueError("short_length must not exceed long_length")
        return self


class ProcessorConfig(BaseModel):
    """Fact validation rules.

    The marker-word rule is a crude English-sentence heuristic: a record
    passes when at least one common function word appears anywhere in the
    body, even inside a longer word ("these" carries "the"). It is not a
    language detector.

    Attributes:
        min_length: Minimum normalized content length (inclusive)
        max_length: Maximum normalized content length (inclusive)
        banned_words: Substrings that cause rejection (case-insensitive)
        marker_words: Substrings of which at least one must be present
        publish_delay: Offset from creation time to the scheduled publish date
    """

    min_length: int = Field(default=50, ge=1)
    max_length: int = Field(default=500, ge=1)
    banned_words: list[str] = Field(default_factory=lambda: list(DEFAULT_BANNED_WORDS))
    marker_words: list[str] = Field(default_factory=lambda: list(DEFAULT_MARKER_WORDS))
    publish_delay: timedelta = Field(default=timedelta(days=1))

    @field_validator("banned_words", "marker_words", mode="before")
    @classmethod
    def lowercase_words(cls, v: list[str]) -> list[str]:
        """Normalize word lists to lowercase."""
        return normalize_string_list(v)

    @model_validator(mode="after")
    def validate_lengths(self) -> "ProcessorConfig":
        """Ensure min_length <= max_length."""
        if self.min_length > self.max_length:
            raise ValueError("min_length must not exceed max_length")
        return self


class CollectionConfig(BaseModel):
    """Collection pass configuration.

    Attributes:
        interval: Time between scheduled passes
        queue_size: Capacity of the hand-off queue between sources and the writer
        source_timeout: Deadline for one source's whole fetch
    """

    interval: timedelta = Field(default=timedelta(hours=6))
    queue_size: int = Field(default=100, ge=1, le=10_000)
    source_timeout: float = Field(default=120.0, gt=0.0)

    @field_validator("interval", mode="before")
    @classmethod
    def validate_interval(cls, v: object) -> timedelta:
        """Parse duration strings such as ``6h``."""
        return parse_duration(v)


__all__ = [
    "DEFAULT_BANNED_WORDS",
    "DEFAULT_MARKER_WORDS",
    "ScoringWeights",
    "ScoringConfig",
    "ProcessorConfig",
    "CollectionConfig",
]
