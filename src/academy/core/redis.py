"""
Redis Configuration

Async Redis client shared by the rate limiter. Redis is optional: when it
cannot be reached at startup the application runs without it.
"""

import logging

from redis.asyncio import Redis, from_url
from redis.exceptions import RedisError

from academy.core.config import settings

logger = logging.getLogger(__name__)

# Redis client instance
redis_client: Redis | None = None


async def init_redis() -> Redis | None:
    """
    Connect to Redis.

    Call this on application startup. Returns None (and leaves the client
    unset) when the server is unreachable.
    """
    global redis_client
    client = from_url(
        settings.redis_url,
        encoding="utf-8",
        decode_responses=True,
    )
    try:
        await client.ping()
    except (RedisError, OSError) as e:
        logger.warning(f"Redis unavailable, continuing without it: {e}")
        await client.aclose()
        return None

    redis_client = client
    return redis_client


async def get_redis() -> Redis | None:
    """Get the Redis client, or None when Redis is not connected."""
    return redis_client


async def close_redis() -> None:
    """Close Redis connection."""
    global redis_client
    if redis_client:
        await redis_client.aclose()
        redis_client = None
