"""Unit tests for content configuration models."""

from datetime import timedelta

import pytest
from pydantic import ValidationError

from onefact.config import CollectionConfig, ProcessorConfig, ScoringConfig
from onefact.config.content import DEFAULT_BANNED_WORDS, DEFAULT_MARKER_WORDS


class TestScoringConfig:
    """Tests for ScoringConfig."""

    def test_defaults(self):
        """Test the default scoring table."""
        config = ScoringConfig()
        assert config.baseline == 1.0
        assert config.threshold == 0.7
        assert (config.sweet_spot_min, config.sweet_spot_max) == (200, 300)
        assert (config.short_length, config.long_length) == (100, 400)
        assert config.weights.urls_bonus == 0.2

    def test_inverted_sweet_spot_rejected(self):
        with pytest.raises(ValidationError, match="sweet_spot_min"):
            ScoringConfig(sweet_spot_min=300, sweet_spot_max=200)

    def test_inverted_length_bounds_rejected(self):
        with pytest.raises(ValidationError, match="short_length"):
            ScoringConfig(short_length=500, long_length=400)

    def test_negative_weight_rejected(self):
        with pytest.raises(ValidationError):
            ScoringConfig(weights={"urls_bonus": -0.1})


class TestProcessorConfig:
    """Tests for ProcessorConfig."""

    def test_defaults(self):
        config = ProcessorConfig()
        assert config.min_length == 50
        assert config.max_length == 500
        assert config.banned_words == DEFAULT_BANNED_WORDS
        assert config.marker_words == DEFAULT_MARKER_WORDS
        assert config.publish_delay == timedelta(days=1)

    def test_word_lists_lowercased(self):
        """Test word lists accept mixed case and comma strings."""
        config = ProcessorConfig(banned_words="Spoiler, GORE", marker_words=["The"])
        assert config.banned_words == ["spoiler", "gore"]
        assert config.marker_words == ["the"]

    def test_min_above_max_rejected(self):
        with pytest.raises(ValidationError, match="min_length"):
            ProcessorConfig(min_length=600, max_length=500)


class TestCollectionConfig:
    """Tests for CollectionConfig."""

    def test_defaults(self):
        config = CollectionConfig()
        assert config.interval == timedelta(hours=6)
        assert config.queue_size == 100
        assert config.source_timeout == 120.0

    def test_interval_string(self):
        assert CollectionConfig(interval="1h30m").interval == timedelta(minutes=90)

    def test_invalid_interval(self):
        with pytest.raises(ValidationError):
            CollectionConfig(interval="soon")

    def test_queue_size_bounds(self):
        with pytest.raises(ValidationError):
            CollectionConfig(queue_size=0)
