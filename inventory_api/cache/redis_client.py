"""
Redis client - best-effort cache for read-mostly documents.
Any Redis failure degrades to a cache miss; callers never see it.
"""

import json
import logging
from typing import Any

from redis.asyncio import Redis

from inventory_api.config import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()

# Shared async Redis client (connection pool managed by redis-py)
_redis: Redis | None = None


async def get_redis() -> Redis:
    global _redis
    if _redis is None:
        _redis = Redis.from_url(
            settings.redis_url,
            encoding="utf-8",
            decode_responses=True,
            socket_connect_timeout=1,
        )
    return _redis


async def close_redis() -> None:
    global _redis
    if _redis is not None:
        await _redis.aclose()
        _redis = None


async def cache_get_json(key: str) -> Any | None:
    """Get and decode a JSON value. None on miss, error, or when caching is off."""
    if not settings.cache_enabled:
        return None
    try:
        client = await get_redis()
        raw = await client.get(key)
        return json.loads(raw) if raw else None
    except Exception as exc:
        logger.debug("cache get failed for %s: %s", key, exc)
        return None


async def cache_set_json(key: str, value: Any, ttl_seconds: int = 300) -> bool:
    if not settings.cache_enabled:
        return False
    try:
        client = await get_redis()
        await client.setex(key, ttl_seconds, json.dumps(value))
        return True
    except Exception as exc:
        logger.debug("cache set failed for %s: %s", key, exc)
        return False


async def cache_delete(key: str) -> bool:
    """Invalidate cache key (e.g. after a settings write)."""
    if not settings.cache_enabled:
        return False
    try:
        client = await get_redis()
        await client.delete(key)
        return True
    except Exception as exc:
        logger.debug("cache delete failed for %s: %s", key, exc)
        return False
