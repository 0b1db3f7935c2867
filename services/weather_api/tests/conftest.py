"""
Shared test fixtures for the weather cache API test suite.

Provides:
- dict-backed FakeRedis with a manual clock (no Redis server needed)
- CountingProvider so tests can assert how often the upstream was called
- a ServiceContext wired to both, and an async client bound to an app built
  around that context
"""

import os

import pytest
from httpx import ASGITransport, AsyncClient

# Ensure test env vars before any app imports
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("REDIS_HOST", "localhost")
os.environ.setdefault("SENTRY_DSN", "")

from services.weather_api.cache.client import CacheClient  # noqa: E402
from services.weather_api.config import Settings  # noqa: E402
from services.weather_api.context import ServiceContext  # noqa: E402
from services.weather_api.main import create_app  # noqa: E402
from services.weather_api.tests.helpers.fake_redis import FakeRedis  # noqa: E402
from services.weather_api.tests.helpers.providers import CountingProvider  # noqa: E402


@pytest.fixture
def test_settings() -> Settings:
    return Settings(_env_file=None, environment="test", redis_connect_attempts=3)


@pytest.fixture
def fake_redis() -> FakeRedis:
    return FakeRedis()


@pytest.fixture
def provider() -> CountingProvider:
    return CountingProvider()


@pytest.fixture
def cache_client(fake_redis: FakeRedis) -> CacheClient:
    return CacheClient(fake_redis)


@pytest.fixture
def context(test_settings, cache_client, provider) -> ServiceContext:
    return ServiceContext.build(test_settings, cache_client, provider)


@pytest.fixture
def app(context):
    return create_app(context=context)


@pytest.fixture
async def client(app):
    """Async HTTP client bound to the test app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
