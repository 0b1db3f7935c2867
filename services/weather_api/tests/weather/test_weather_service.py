"""
Tests for the read-through WeatherService.

Redis is the dict-backed FakeRedis; the provider is CountingProvider so
every upstream call is visible.
"""

from __future__ import annotations

import json

import pytest

from services.weather_api.cache.client import CacheClient
from services.weather_api.tests.helpers.fake_redis import FakeRedis
from services.weather_api.tests.helpers.providers import CountingProvider
from services.weather_api.weather.provider import ProviderError
from services.weather_api.weather.service import WeatherService


@pytest.fixture
def service(cache_client, provider) -> WeatherService:
    return WeatherService(cache_client, provider, ttl_seconds=300)


class TestCacheMiss:
    async def test_miss_calls_provider_and_populates(self, service, provider, fake_redis):
        result = await service.get_weather("paris")

        assert result.cache_hit is False
        assert provider.calls == ["paris"]
        assert fake_redis.raw("paris") == result.body
        assert json.loads(result.body)["location"] == "paris"

    async def test_entry_written_with_ttl(self, service, fake_redis):
        await service.get_weather("paris")
        assert await fake_redis.ttl("paris") == 300

    async def test_lookup_error_treated_as_miss(self, service, provider, fake_redis):
        fake_redis.put_raw("paris", "stale")
        fake_redis.fail_on.add("get")

        result = await service.get_weather("paris")

        assert result.cache_hit is False
        assert provider.call_count == 1


class TestCacheHit:
    async def test_hit_returns_cached_bytes_without_provider(self, service, provider):
        first = await service.get_weather("paris")
        second = await service.get_weather("paris")

        assert second.cache_hit is True
        assert second.body == first.body
        assert provider.call_count == 1

    async def test_hit_is_pass_through(self, service, provider, fake_redis):
        # Whatever is stored is returned verbatim, even if it is not a reading
        fake_redis.put_raw("paris", '{"custom": true}', ex=60)

        result = await service.get_weather("paris")

        assert result.body == '{"custom": true}'
        assert provider.call_count == 0


class TestExpiry:
    async def test_refetch_after_ttl(self, service, provider, fake_redis):
        first = await service.get_weather("paris")
        fake_redis.advance(301)

        second = await service.get_weather("paris")

        assert second.cache_hit is False
        assert provider.call_count == 2
        assert second.body != first.body
        assert fake_redis.raw("paris") == second.body

    async def test_still_cached_just_before_ttl(self, service, provider, fake_redis):
        await service.get_weather("paris")
        fake_redis.advance(299)

        result = await service.get_weather("paris")

        assert result.cache_hit is True
        assert provider.call_count == 1


class TestKeyNormalisation:
    async def test_case_sensitive_keys(self, service, provider, fake_redis):
        await service.get_weather("London")
        await service.get_weather("london")

        assert provider.calls == ["London", "london"]
        assert fake_redis.raw("London") is not None
        assert fake_redis.raw("london") is not None

    async def test_whitespace_not_trimmed(self, service, provider):
        await service.get_weather("paris")
        await service.get_weather(" paris")
        assert provider.call_count == 2


class TestFailures:
    async def test_provider_error_propagates_and_nothing_cached(self, cache_client, fake_redis):
        service = WeatherService(cache_client, CountingProvider(fail=True))

        with pytest.raises(ProviderError):
            await service.get_weather("paris")
        assert fake_redis.raw("paris") is None
        assert "set" not in fake_redis.commands

    async def test_provider_not_retried(self, cache_client):
        provider = CountingProvider(fail=True)
        service = WeatherService(cache_client, provider)

        with pytest.raises(ProviderError):
            await service.get_weather("paris")
        assert provider.call_count == 1

    async def test_cache_write_failure_still_returns_reading(self, service, provider, fake_redis):
        fake_redis.fail_on.add("set")

        result = await service.get_weather("paris")

        assert result.cache_hit is False
        assert json.loads(result.body)["location"] == "paris"
        assert fake_redis.raw("paris") is None

    async def test_redis_down_every_request_hits_provider(self, provider):
        redis = FakeRedis()
        redis.down = True
        service = WeatherService(CacheClient(redis), provider)

        await service.get_weather("paris")
        await service.get_weather("paris")

        assert provider.call_count == 2
