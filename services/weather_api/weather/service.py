"""
WeatherService: read-through cache in front of a WeatherProvider.

Cache strategy:
  - Key is the location exactly as requested ("London" and "london" are
    separate entries and separate provider calls)
  - On hit: the stored JSON text is returned unchanged, byte for byte
  - On miss (absent or a failed lookup): call the provider, serialise,
    write with a TTL, return the fresh JSON text
  - A failed cache write is logged and ignored; the caller still gets the
    fresh reading
  - Provider failures propagate as ProviderError and nothing is cached

There is no single-flight: concurrent misses for the same location each call
the provider and the last write wins.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from services.weather_api.cache.client import CacheClient
from services.weather_api.weather.provider import ProviderError, WeatherProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CachedWeather:
    body: str
    """WeatherReading JSON, either the cached text or freshly serialised."""

    cache_hit: bool


class WeatherService:
    """
    Usage:
        service = WeatherService(cache=CacheClient(redis), provider=SyntheticWeatherProvider())
        result = await service.get_weather("Tokyo")
        result.body  # JSON text
    """

    def __init__(self, cache: CacheClient, provider: WeatherProvider, ttl_seconds: int = 300) -> None:
        self._cache = cache
        self._provider = provider
        self._ttl_seconds = ttl_seconds

    async def get_weather(self, location: str) -> CachedWeather:
        logger.info("Getting weather data for location: %r", location)

        cached = await self._cache.get(location)
        if cached is not None:
            logger.debug("Cache hit for location: %r", location)
            return CachedWeather(body=cached, cache_hit=True)
        logger.debug("Cache miss for location: %r", location)

        try:
            reading = await self._provider.fetch(location)
        except ProviderError:
            logger.warning("Error fetching weather data for %r", location, exc_info=True)
            raise

        body = reading.to_json()
        if await self._cache.set(location, body, ttl_seconds=self._ttl_seconds):
            logger.debug("Cached weather data for %r (ttl=%ds)", location, self._ttl_seconds)
        return CachedWeather(body=body, cache_hit=False)
