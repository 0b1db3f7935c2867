"""
Cache client adapter: thin async wrapper over a shared redis.asyncio client.

Keys are the location strings exactly as callers send them (no prefix, no
slug, case-sensitive). Values are WeatherReading JSON text.

Graceful degradation: no operation raises. Failures are logged at WARNING and
reported as a miss (get), False (set / ping), None (ttl), or a partial key
list (scan_keys). Request handlers therefore never see a Redis exception.

A single client instance is shared by all in-flight requests; redis.asyncio
pools connections internally, so no locking is needed here.

Startup: connect_cache() pings Redis a few times with increasing sleeps.
If Redis never answers the adapter is returned anyway; the service starts
degraded and the client reconnects lazily once Redis is reachable.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable

import redis.asyncio as aioredis
from redis.asyncio.retry import Retry
from redis.backoff import NoBackoff

from services.weather_api.config import Settings

logger = logging.getLogger(__name__)


class CacheClient:
    """
    Redis-backed key/value adapter.

    Usage:
        cache = CacheClient(redis_client)
        body = await cache.get("paris")
        if body is None:
            await cache.set("paris", reading.to_json(), ttl_seconds=300)
    """

    def __init__(self, redis: Any) -> None:
        """
        Args:
            redis: An async Redis client (redis.asyncio compatible), created
                   with decode_responses=True so values come back as str.
        """
        self._redis = redis

    async def get(self, key: str) -> str | None:
        """Return the stored value, or None on miss / failure."""
        try:
            return await self._redis.get(key)
        except Exception:
            logger.warning("Cache GET failed for key=%r", key, exc_info=True)
            return None

    async def set(self, key: str, value: str, ttl_seconds: int) -> bool:
        """Write value with an expiry. Returns False if the write failed."""
        try:
            await self._redis.set(key, value, ex=ttl_seconds)
            return True
        except Exception:
            logger.warning("Cache SET failed for key=%r", key, exc_info=True)
            return False

    async def scan_keys(self) -> list[str]:
        """
        Return every key in the store via a full SCAN.

        No pagination and no ordering guarantee. Cost is O(N) in the number
        of keys, which is acceptable only at this service's intended scale.
        """
        keys: list[str] = []
        try:
            async for key in self._redis.scan_iter(match="*"):
                keys.append(key)
        except Exception:
            logger.warning("Cache SCAN failed after %d keys", len(keys), exc_info=True)
        return keys

    async def ttl(self, key: str) -> int | None:
        """Remaining seconds (-1 = no expiry, -2 = missing), or None on failure."""
        try:
            return int(await self._redis.ttl(key))
        except Exception:
            logger.warning("Cache TTL failed for key=%r", key, exc_info=True)
            return None

    async def ping(self) -> bool:
        """Liveness check. Never mutates the store."""
        try:
            await self._redis.ping()
            return True
        except Exception as exc:
            logger.warning("Cache PING failed: %s", exc)
            return False

    async def close(self) -> None:
        try:
            await self._redis.aclose()
        except Exception:
            logger.warning("Cache close failed", exc_info=True)


def create_redis(settings: Settings) -> aioredis.Redis:
    """Build the shared client. Per-command retries are off; handlers never retry."""
    return aioredis.Redis(
        host=settings.redis_host,
        port=settings.redis_port,
        db=0,
        decode_responses=True,
        socket_connect_timeout=settings.redis_socket_timeout_s,
        socket_timeout=settings.redis_socket_timeout_s,
        retry=Retry(NoBackoff(), 0),
    )


async def connect_cache(
    settings: Settings,
    redis: Any = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> CacheClient:
    """
    Create the cache adapter and ping Redis up to redis_connect_attempts times.

    Sleeps 1s, 2s, 3s, ... between failed attempts. Never raises: an
    unreachable Redis yields a degraded (but usable) adapter.
    """
    logger.info("Connecting to Redis at %s:%d...", settings.redis_host, settings.redis_port)
    cache = CacheClient(redis if redis is not None else create_redis(settings))

    attempts = settings.redis_connect_attempts
    for attempt in range(1, attempts + 1):
        if await cache.ping():
            logger.info("Successfully connected to Redis")
            return cache
        logger.warning("Attempt %d/%d: failed to connect to Redis", attempt, attempts)
        if attempt < attempts:
            await sleep(float(attempt))

    logger.warning(
        "Could not establish initial Redis connection; starting degraded (%s:%d)",
        settings.redis_host,
        settings.redis_port,
    )
    return cache
