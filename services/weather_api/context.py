"""
ServiceContext: everything a request handler needs, built once per process.

The FastAPI app stores one context on app.state.context; routers pull it in
through the get_context dependency. Tests build their own context around a
FakeRedis and a counting provider and hand it to create_app().
"""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request

from services.weather_api.cache.client import CacheClient
from services.weather_api.cache.inspector import CacheInspector
from services.weather_api.config import Settings
from services.weather_api.weather.provider import WeatherProvider
from services.weather_api.weather.service import WeatherService


@dataclass(frozen=True)
class ServiceContext:
    settings: Settings
    cache: CacheClient
    provider: WeatherProvider
    weather: WeatherService
    inspector: CacheInspector

    @classmethod
    def build(cls, settings: Settings, cache: CacheClient, provider: WeatherProvider) -> ServiceContext:
        return cls(
            settings=settings,
            cache=cache,
            provider=provider,
            weather=WeatherService(cache, provider, ttl_seconds=settings.cache_ttl_seconds),
            inspector=CacheInspector(cache),
        )


def get_context(request: Request) -> ServiceContext:
    """FastAPI dependency: the process-wide context set during app startup."""
    return request.app.state.context
