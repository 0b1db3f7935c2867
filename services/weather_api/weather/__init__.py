"""
Weather package.

WeatherReading is the cached value, WeatherProvider produces readings, and
WeatherService puts a Redis read-through cache (5 minute TTL) in front of it.
"""

from services.weather_api.weather.models import WeatherReading
from services.weather_api.weather.provider import (
    OpenWeatherMapProvider,
    ProviderError,
    SyntheticWeatherProvider,
    WeatherProvider,
    build_provider,
)
from services.weather_api.weather.service import CachedWeather, WeatherService

__all__ = [
    "WeatherReading",
    "WeatherProvider",
    "SyntheticWeatherProvider",
    "OpenWeatherMapProvider",
    "ProviderError",
    "build_provider",
    "WeatherService",
    "CachedWeather",
]
