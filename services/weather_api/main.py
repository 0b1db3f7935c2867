"""
Weather cache API: FastAPI service returning weather per location with a
5 minute Redis read-through cache.

Entrypoint: uvicorn services.weather_api.main:app --host 0.0.0.0 --port 8080
        or: weather-cache-api   (console script, honours PORT / LOG_LEVEL)
"""

import logging
import uuid
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.responses import JSONResponse

from services.weather_api.cache.client import connect_cache
from services.weather_api.config import Settings, settings as default_settings
from services.weather_api.context import ServiceContext
from services.weather_api.middleware.cors import setup_cors
from services.weather_api.middleware.sentry import setup_sentry
from services.weather_api.routers import cache, health, weather
from services.weather_api.weather.provider import build_provider

logger = logging.getLogger(__name__)

_ERROR_CODES = {
    404: "NOT_FOUND",
    405: "METHOD_NOT_ALLOWED",
    422: "VALIDATION_ERROR",
    503: "SERVICE_UNAVAILABLE",
}


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", None) or str(uuid.uuid4())


def error_response(request: Request, status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": {
                "code": _ERROR_CODES.get(status_code, "INTERNAL_ERROR"),
                "message": message,
            },
            "requestId": _request_id(request),
        },
        headers=headers,
    )


def create_app(context: ServiceContext | None = None, settings: Settings | None = None) -> FastAPI:
    """
    Build the FastAPI app.

    Args:
        context:  pre-built ServiceContext (tests). When None, the lifespan
                  connects to Redis and picks a provider from settings.
        settings: defaults to the module-level settings.
    """
    settings = settings or (context.settings if context else default_settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup/shutdown lifecycle."""
        setup_sentry(settings)
        settings.log_summary()

        owned = None
        if getattr(app.state, "context", None) is None:
            cache_client = await connect_cache(settings)
            owned = ServiceContext.build(settings, cache_client, build_provider(settings))
            app.state.context = owned

        yield

        if owned is not None:
            await owned.cache.close()

    app = FastAPI(
        title="Weather Cache API",
        version=settings.app_version,
        docs_url="/docs" if settings.environment == "development" else None,
        redoc_url=None,
        lifespan=lifespan,
    )
    app.state.context = context

    app.include_router(weather.router)
    app.include_router(cache.router)
    app.include_router(health.router)

    # Request ID injection
    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next) -> Response:
        request_id = request.headers.get("x-request-id", str(uuid.uuid4()))
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response

    # CORS (added last so it is outermost and answers preflight itself)
    setup_cors(app)

    # -- Exception Handlers --

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        message = exc.detail if isinstance(exc.detail, str) else "Request failed."
        if exc.status_code == 404 and exc.detail == "Not Found":
            message = "Resource not found."
        return error_response(request, exc.status_code, message, headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return error_response(request, 422, str(exc.errors()))

    @app.exception_handler(Exception)
    async def internal_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return error_response(request, 500, "An unexpected error occurred.")

    return app


app = create_app()


def run() -> None:
    """Serve the module-level app with uvicorn on settings.port."""
    logging.basicConfig(
        level=default_settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info(
        "Server starting on port %d in %s mode",
        default_settings.port,
        default_settings.environment,
    )
    uvicorn.run(app, host="0.0.0.0", port=default_settings.port, log_config=None)


if __name__ == "__main__":
    run()
