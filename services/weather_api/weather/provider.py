"""
Weather providers: "fetch the current reading for a location".

Every provider satisfies the same contract: given a location string, return a
WeatherReading or raise ProviderError. The read-through service never knows
which one it is talking to.

  SyntheticWeatherProvider  time-derived placeholder values, no network
  OpenWeatherMapProvider    /data/2.5/weather over httpx, metric units

OpenWeatherMap /weather endpoint returns (units=metric):
  {
    "weather": [{"id": 803, "main": "Clouds", "description": "broken clouds"}],
    "main":    {"temp": 18.3, "humidity": 72, ...},
    "wind":    {"speed": 4.1, ...},
    "name":    "Paris",
    ...
  }
"""

from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Any, Callable, Protocol

import httpx

from services.weather_api.config import Settings
from services.weather_api.weather.models import WeatherReading

logger = logging.getLogger(__name__)

_OWM_BASE = "https://api.openweathermap.org/data/2.5"
_WEATHER_ENDPOINT = f"{_OWM_BASE}/weather"

_SYNTHETIC_DESCRIPTION = "Partly cloudy"


class ProviderError(Exception):
    """The provider could not produce a reading for the requested location."""

    def __init__(self, location: str, message: str) -> None:
        super().__init__(f"{message} (location={location!r})")
        self.location = location


class WeatherProvider(Protocol):
    async def fetch(self, location: str) -> WeatherReading: ...


def _rfc3339(ts_ns: int) -> str:
    dt = datetime.fromtimestamp(ts_ns // 1_000_000_000, tz=timezone.utc)
    return dt.isoformat().replace("+00:00", "Z")


class SyntheticWeatherProvider:
    """
    Placeholder provider: pseudo-varying values derived from the clock.

    Args:
        clock_ns: returns the current time in nanoseconds. Defaults to
                  time.time_ns; tests pass a fixed value.
    """

    def __init__(self, clock_ns: Callable[[], int] = time.time_ns) -> None:
        self._clock_ns = clock_ns

    async def fetch(self, location: str) -> WeatherReading:
        now_ns = self._clock_ns()
        return WeatherReading(
            temperature=22.5 + now_ns % 5,
            humidity=65.0 + now_ns % 10,
            windSpeed=12.0 + now_ns % 8,
            description=_SYNTHETIC_DESCRIPTION,
            location=location,
            timestamp=_rfc3339(now_ns),
        )


def _parse_owm(location: str, payload: dict[str, Any], fetched_at: datetime) -> WeatherReading:
    """Map an OpenWeatherMap /weather response onto a WeatherReading."""
    try:
        weather_list = payload.get("weather") or [{}]
        main = payload["main"]
        return WeatherReading(
            temperature=float(main["temp"]),
            humidity=float(main["humidity"]),
            windSpeed=float(payload.get("wind", {}).get("speed", 0.0)),
            description=weather_list[0].get("description", "unknown"),
            # Echo the caller's location rather than OWM's canonical "name"
            location=location,
            timestamp=fetched_at.replace(microsecond=0).isoformat().replace("+00:00", "Z"),
        )
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise ProviderError(location, f"malformed OpenWeatherMap payload: {exc}") from exc


class OpenWeatherMapProvider:
    """
    OpenWeatherMap client. One HTTP call per fetch, no retries.

    Usage:
        provider = OpenWeatherMapProvider(api_key="...", timeout_s=8.0)
        reading = await provider.fetch("Tokyo")
    """

    def __init__(
        self,
        api_key: str,
        timeout_s: float = 8.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Args:
            api_key:   OpenWeatherMap API key (WEATHER_API_KEY env var).
            timeout_s: per-call HTTP timeout.
            transport: optional httpx transport, used by tests to stub the upstream.
        """
        self._api_key = api_key
        self._timeout_s = timeout_s
        self._transport = transport

    async def fetch(self, location: str) -> WeatherReading:
        if not self._api_key:
            raise ProviderError(location, "WEATHER_API_KEY not set")

        try:
            async with httpx.AsyncClient(timeout=self._timeout_s, transport=self._transport) as client:
                resp = await client.get(
                    _WEATHER_ENDPOINT,
                    params={
                        "q": location,
                        "appid": self._api_key,
                        "units": "metric",
                    },
                )
                resp.raise_for_status()
                raw = resp.json()
        except httpx.HTTPStatusError as exc:
            logger.warning(
                "OpenWeatherMap returned %d for location=%r: %s",
                exc.response.status_code,
                location,
                exc.response.text[:200],
            )
            raise ProviderError(location, f"upstream returned {exc.response.status_code}") from exc
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("OpenWeatherMap fetch failed for location=%r: %s", location, exc)
            raise ProviderError(location, "upstream request failed") from exc

        if not isinstance(raw, dict):
            raise ProviderError(location, "malformed OpenWeatherMap payload")
        return _parse_owm(location, raw, datetime.now(timezone.utc))


def build_provider(settings: Settings) -> WeatherProvider:
    """Select the provider named by WEATHER_PROVIDER."""
    if settings.weather_provider == "openweathermap":
        return OpenWeatherMapProvider(
            api_key=settings.weather_api_key,
            timeout_s=settings.weather_api_timeout_s,
        )
    return SyntheticWeatherProvider()
