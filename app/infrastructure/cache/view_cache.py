# app/infrastructure/cache/view_cache.py
"""
Cache of rendered dashboard pages, keyed by request path (+ query string).

Only HTML is cached, never entities. Mutations call :meth:`ViewCache.revalidate_path`
so the next request for that page re-reads the database.

A Redis outage must not break a page or a mutation: errors are logged and
treated as a miss.
"""

from __future__ import annotations

import logging

import redis.asyncio as redis
from redis.exceptions import RedisError

from app.core.config import settings

logger = logging.getLogger("view_cache")

KEY_PREFIX = "view:"


class ViewCache:
    def __init__(self, client: redis.Redis, ttl_seconds: int | None = None) -> None:
        self._r = client
        self._ttl = settings.VIEW_CACHE_TTL_SECONDS if ttl_seconds is None else ttl_seconds

    @staticmethod
    def _key(path: str, query: str = "") -> str:
        return f"{KEY_PREFIX}{path}?{query}" if query else f"{KEY_PREFIX}{path}"

    async def get(self, path: str, query: str = "") -> str | None:
        try:
            return await self._r.get(self._key(path, query))
        except RedisError as exc:
            logger.warning("View cache read failed for %s: %s", path, exc)
            return None

    async def set(self, path: str, html: str, query: str = "") -> None:
        if self._ttl <= 0:
            return
        try:
            await self._r.set(self._key(path, query), html, ex=self._ttl)
        except RedisError as exc:
            logger.warning("View cache write failed for %s: %s", path, exc)

    async def revalidate_path(self, path: str) -> None:
        """Mark every cached render of *path* (any query string) as stale."""
        keys = [self._key(path)]
        try:
            async for key in self._r.scan_iter(match=f"{self._key(path)}\\?*"):
                keys.append(key)
            await self._r.delete(*keys)
        except RedisError as exc:
            logger.warning("View cache invalidation failed for %s: %s", path, exc)
            return
        logger.debug("Revalidated %s (%d keys)", path, len(keys))
