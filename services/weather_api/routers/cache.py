"""
Cache router: read-only introspection of the Redis store.

GET /api/cache/stats   totals, keys with a TTL, decoded readings per key
GET /api/cache/{key}   one decoded reading; 404 if absent or not a reading
GET /api/cache         every key as a JSON array

/stats and the bare list do a full SCAN on every call and are not paginated.
/stats must stay registered before /{key} or "stats" would be read as a key.
"""

from fastapi import APIRouter, Depends, HTTPException

from services.weather_api.cache.inspector import CacheStats
from services.weather_api.context import ServiceContext, get_context
from services.weather_api.weather.models import WeatherReading

router = APIRouter(prefix="/api", tags=["cache"])


@router.get("/cache/stats", response_model=CacheStats)
async def get_cache_stats(ctx: ServiceContext = Depends(get_context)) -> CacheStats:
    return await ctx.inspector.stats()


@router.get("/cache/{key}", response_model=WeatherReading)
async def get_cache_key(key: str, ctx: ServiceContext = Depends(get_context)) -> WeatherReading:
    reading = await ctx.inspector.get_reading(key)
    if reading is None:
        raise HTTPException(status_code=404, detail="Key not found")
    return reading


@router.get("/cache")
async def list_cache_keys(ctx: ServiceContext = Depends(get_context)) -> list[str]:
    return await ctx.inspector.list_keys()
