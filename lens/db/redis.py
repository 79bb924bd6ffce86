"""Shared Redis connection pool for persisted preferences."""

import redis.asyncio as redis
import structlog

from lens.core.config import get_settings

logger = structlog.get_logger(__name__)

_redis: redis.Redis | None = None


async def init_redis(url: str | None = None) -> None:
    """Initialize the shared Redis connection pool and verify connectivity."""
    global _redis

    if _redis is not None:
        return

    redis_url = url or get_settings().redis_url
    client = redis.from_url(
        redis_url,
        encoding="utf-8",
        decode_responses=True,
    )
    await client.ping()
    _redis = client
    logger.info("redis_connected")


async def close_redis() -> None:
    global _redis

    if _redis is not None:
        await _redis.aclose()
        _redis = None


def get_redis() -> redis.Redis:
    """Return the shared Redis client.

    Raises RuntimeError if init_redis() has not been called.
    """
    if _redis is None:
        raise RuntimeError("Redis not initialized. Call init_redis() first.")
    return _redis
