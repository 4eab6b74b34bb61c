"""Tests for the shared model mixins."""

import uuid
from datetime import UTC, datetime, timedelta, timezone

import pytest

from onefact.models import Fact
from onefact.models.base import as_utc


@pytest.mark.unit
class TestAsUtc:
    """Tests for as_utc()."""

    def test_naive_becomes_utc(self):
        value = as_utc(datetime(2026, 10, 18, 9, 30))

        assert value == datetime(2026, 10, 18, 9, 30, tzinfo=UTC)

    def test_aware_unchanged(self):
        seoul = datetime(2026, 10, 18, 9, 30, tzinfo=timezone(timedelta(hours=9)))

        assert as_utc(seoul) is seoul

    def test_none(self):
        assert as_utc(None) is None


@pytest.mark.unit
class TestParseId:
    """Tests for UUIDMixin.parse_id()."""

    def test_valid(self):
        fact_id = uuid.uuid4()

        assert Fact.parse_id(str(fact_id)) == fact_id

    @pytest.mark.parametrize("value", ["", "42", "not-a-uuid"])
    def test_invalid(self, value):
        assert Fact.parse_id(value) is None


@pytest.mark.unit
def test_touch_stamps_updated_at():
    """Test touch() sets updated_at to the given time or now."""
    row = Fact(content="x", source="test", category="General", content_hash="c" * 64)
    stamp = datetime(2026, 10, 18, 12, 0, tzinfo=UTC)

    row.touch(stamp)
    assert row.updated_at == stamp

    before = datetime.now(UTC)
    row.touch()
    assert row.updated_at >= before
