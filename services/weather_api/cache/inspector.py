"""
Cache introspection: list keys, decode one key, aggregate stats.

All three operations read the live store; nothing is memoised in-process.
list_keys() and stats() do a full SCAN per call. There is no pagination
contract: at the intended scale (a handful of cached locations) a full scan
is cheap, and callers must not assume it stays cheap beyond that.
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, Field, ValidationError

from services.weather_api.cache.client import CacheClient
from services.weather_api.weather.models import WeatherReading

logger = logging.getLogger(__name__)


class CacheStats(BaseModel):
    """Aggregate view over every key in the cache."""

    totalKeys: int = 0
    keysWithTTL: int = 0
    cachedLocations: list[str] = Field(default_factory=list)
    data: dict[str, WeatherReading] = Field(default_factory=dict)


class CacheInspector:
    def __init__(self, cache: CacheClient) -> None:
        self._cache = cache

    async def list_keys(self) -> list[str]:
        return await self._cache.scan_keys()

    async def get_reading(self, key: str) -> WeatherReading | None:
        """Decoded reading for key, or None if absent, unreadable, or not a reading."""
        raw = await self._cache.get(key)
        if raw is None:
            return None
        try:
            return WeatherReading.from_json(raw)
        except ValidationError:
            logger.info("Cache key=%r does not hold a weather reading", key)
            return None

    async def stats(self) -> CacheStats:
        """
        One pass over every key:
          - totalKeys counts all keys, decodable or not
          - keysWithTTL counts keys with a positive remaining TTL
          - cachedLocations / data include only values that decode
        Keys whose value fails to read or decode are skipped silently.
        """
        stats = CacheStats()
        for key in await self._cache.scan_keys():
            stats.totalKeys += 1

            ttl = await self._cache.ttl(key)
            if ttl is not None and ttl > 0:
                stats.keysWithTTL += 1

            raw = await self._cache.get(key)
            if raw is None:
                continue
            try:
                reading = WeatherReading.from_json(raw)
            except ValidationError:
                continue
            stats.data[key] = reading
            stats.cachedLocations.append(reading.location)
        return stats
