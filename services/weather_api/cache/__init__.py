"""
Cache package: the Redis adapter and the read-only introspection helpers.
"""

from services.weather_api.cache.client import CacheClient, connect_cache, create_redis
from services.weather_api.cache.inspector import CacheInspector, CacheStats

__all__ = ["CacheClient", "connect_cache", "create_redis", "CacheInspector", "CacheStats"]
