"""
Weather router: read-through lookup.

GET /api/weather/{location}
- Body is the WeatherReading JSON: the cached text verbatim on a hit, the
  freshly serialised reading on a miss
- X-Cache: HIT | MISS
- Provider failure -> 500, nothing cached
"""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import Response

from services.weather_api.context import ServiceContext, get_context
from services.weather_api.weather.provider import ProviderError

router = APIRouter(prefix="/api", tags=["weather"])


@router.get("/weather/{location}")
async def get_weather(
    location: str,
    ctx: ServiceContext = Depends(get_context),
) -> Response:
    try:
        result = await ctx.weather.get_weather(location)
    except ProviderError:
        raise HTTPException(status_code=500, detail="Error fetching weather data")

    return Response(
        content=result.body,
        media_type="application/json",
        headers={"X-Cache": "HIT" if result.cache_hit else "MISS"},
    )
