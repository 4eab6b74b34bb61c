"""Redis-backed cache for the daily fact and serve counters.

Keys:
    daily_fact:YYYY-MM-DD[:category]  serialized ProcessedFact
    fact_serve_count:{id}             integer counter

Cache failures never propagate: reads degrade to a miss and writes to a
no-op.
"""

from datetime import UTC, date, datetime, time, timedelta

from pydantic import ValidationError
from redis.asyncio import Redis

from onefact.core.logging import get_logger
from onefact.core.redis import cache_get, cache_incr, cache_set
from onefact.services.collector.base import ProcessedFact

logger = get_logger(__name__)

DAILY_FACT_PREFIX = "daily_fact"
SERVE_COUNT_PREFIX = "fact_serve_count"


def daily_fact_key(day: date, category: str | None = None) -> str:
    """Build the daily fact cache key."""
    key = f"{DAILY_FACT_PREFIX}:{day.isoformat()}"
    if category:
        key += f":{category.strip().lower()}"
    return key


def serve_count_key(fact_id: str) -> str:
    """Build the serve counter key."""
    return f"{SERVE_COUNT_PREFIX}:{fact_id}"


def seconds_until_end_of_day(now: datetime) -> int:
    """Seconds from ``now`` until the next UTC midnight (at least 1)."""
    midnight = datetime.combine(now.date() + timedelta(days=1), time.min, tzinfo=UTC)
    return max(1, int((midnight - now).total_seconds()))


class FactCache:
    """Daily fact cache and serve counters.

    Attributes:
        max_ttl: Upper bound for the daily fact TTL in seconds
    """

    def __init__(self, redis: Redis, max_ttl: int = 86400) -> None:
        """Initialize cache.

        Args:
            redis: Async Redis client
            max_ttl: Upper bound for the daily fact TTL in seconds
        """
        self.redis = redis
        self.max_ttl = max_ttl

    async def get_daily_fact(
        self, category: str | None = None, now: datetime | None = None
    ) -> ProcessedFact | None:
        """Get today's cached fact.

        Args:
            category: Category the fact was selected for
            now: Current time (defaults to UTC now)

        Returns:
            Cached fact or None on miss
        """
        now = now or datetime.now(UTC)
        key = daily_fact_key(now.date(), category)
        data = await cache_get(self.redis, key)
        if not isinstance(data, dict):
            return None
        try:
            return ProcessedFact.model_validate(data)
        except ValidationError as e:
            logger.warning("Discarding malformed cached fact", key=key, error=str(e))
            return None

    async def set_daily_fact(
        self,
        fact: ProcessedFact,
        category: str | None = None,
        now: datetime | None = None,
    ) -> bool:
        """Cache today's fact until the end of the UTC day.

        Args:
            fact: Fact to cache
            category: Category the fact was selected for
            now: Current time (defaults to UTC now)

        Returns:
            True if cached
        """
        now = now or datetime.now(UTC)
        ttl = min(self.max_ttl, seconds_until_end_of_day(now))
        return await cache_set(
            self.redis,
            daily_fact_key(now.date(), category),
            fact.model_dump(mode="json"),
            expire=ttl,
        )

    async def increment_serve_count(self, fact_id: str) -> int | None:
        """Increment the serve counter for a fact.

        Returns:
            New count, or None if Redis is unavailable
        """
        return await cache_incr(self.redis, serve_count_key(fact_id))

    async def get_serve_count(self, fact_id: str) -> int:
        """Get the serve counter for a fact (0 when absent)."""
        value = await cache_get(self.redis, serve_count_key(fact_id), default=0)
        try:
            return int(value)
        except (TypeError, ValueError):
            return 0


__all__ = [
    "FactCache",
    "daily_fact_key",
    "serve_count_key",
    "seconds_until_end_of_day",
]
