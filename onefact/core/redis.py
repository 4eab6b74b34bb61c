"""Redis client utilities.

This module provides Redis cache helper functions for use with DI-injected clients.
All Redis client lifecycle management is handled by the DI container.

Every helper logs and swallows Redis failures so callers can treat an
unavailable cache as a miss.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any

from onefact.core.logging import get_logger

if TYPE_CHECKING:
    from redis.asyncio import Redis

logger = get_logger(__name__)


async def cache_set(client: Redis[Any], key: str, value: Any, expire: int | None = None) -> bool:
    """Set value in cache with optional expiration.

    Args:
        client: Async Redis client (from DI)
        key: Cache key
        value: Value to cache (will be JSON serialized if not string)
        expire: Expiration time in seconds (optional)

    Returns:
        True if successful
    """
    try:
        if not isinstance(value, str):
            value = json.dumps(value)

        result = await client.set(key, value, ex=expire)
        logger.debug("Cache set", key=key, expire=expire)
        return bool(result)
    except Exception as e:
        logger.error("Cache set failed", key=key, error=str(e), exc_info=True)
        return False


async def cache_get(client: Redis[Any], key: str, default: Any = None) -> Any:
    """Get value from cache.

    Args:
        client: Async Redis client (from DI)
        key: Cache key
        default: Default value if key doesn't exist

    Returns:
        Cached value (JSON deserialized if applicable) or default
    """
    try:
        value = await client.get(key)
        if value is None:
            return default

        try:
            return json.loads(value)
        except (json.JSONDecodeError, TypeError):
            return value
    except Exception as e:
        logger.error("Cache get failed", key=key, error=str(e), exc_info=True)
        return default


async def cache_incr(client: Redis[Any], key: str) -> int | None:
    """Atomically increment an integer counter.

    Args:
        client: Async Redis client (from DI)
        key: Counter key

    Returns:
        New counter value, or None on failure
    """
    try:
        return int(await client.incr(key))
    except Exception as e:
        logger.error("Cache increment failed", key=key, error=str(e), exc_info=True)
        return None


async def check_redis_connection(client: Redis[Any]) -> bool:
    """Check if Redis connection is healthy.

    Args:
        client: Async Redis client (from DI)

    Returns:
        True if connection is successful, False otherwise
    """
    try:
        await client.ping()
        return True
    except Exception as e:
        logger.error("Redis health check failed", error=str(e), exc_info=True)
        return False
