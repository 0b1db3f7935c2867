"""
Health router: GET /api/health

Pings Redis (no writes). 200 + "healthy" when it answers,
503 + "degraded" when it does not.
"""

import logging

from fastapi import APIRouter, Depends
from starlette.responses import JSONResponse

from services.weather_api.context import ServiceContext, get_context

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
async def health_check(ctx: ServiceContext = Depends(get_context)) -> JSONResponse:
    logger.info("Health check request received")

    redis_ok = await ctx.cache.ping()
    status = "healthy" if redis_ok else "degraded"

    body = {
        "status": status,
        "redis": "connected" if redis_ok else "disconnected",
        "environment": ctx.settings.environment,
        "version": ctx.settings.app_version,
    }
    logger.info("Health check completed with status: %s", status)
    return JSONResponse(status_code=200 if redis_ok else 503, content=body)
