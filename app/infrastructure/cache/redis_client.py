# app/infrastructure/cache/redis_client.py
"""Process-wide Redis connection used by the view cache."""

import logging

import redis.asyncio as redis

from app.core.config import settings

logger = logging.getLogger("redis")

_client: redis.Redis | None = None


def get_redis_client() -> redis.Redis:
    """Lazily create the shared client; connections are opened on first command."""
    global _client
    if _client is None:
        _client = redis.from_url(settings.REDIS_URL, decode_responses=True)
        logger.info("Redis client created for %s", settings.REDIS_URL.rsplit("@", 1)[-1])
    return _client


async def close_redis_client() -> None:
    global _client
    if _client is not None:
        await _client.aclose()
        _client = None
