"""
CORS middleware configuration.
Read-only public API: any origin, GET and OPTIONS only, no credentials.

Browser preflights are answered by CORSMiddleware. A bare OPTIONS (no Origin
or Access-Control-Request-Method) never reaches it as a preflight, so every
/api route also gets an explicit OPTIONS route answering 200 with the same
headers.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from fastapi.routing import APIRoute

ALLOW_METHODS = ["GET", "OPTIONS"]
ALLOW_HEADERS = ["Content-Type"]

_OPTIONS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": ", ".join(ALLOW_METHODS),
    "Access-Control-Allow-Headers": ", ".join(ALLOW_HEADERS),
}


async def _options_ok() -> Response:
    return Response(status_code=200, headers=_OPTIONS_HEADERS)


def setup_cors(app: FastAPI) -> None:
    """Call after every router is included; OPTIONS routes mirror the /api paths."""
    api_paths = sorted(
        {route.path for route in app.routes if isinstance(route, APIRoute) and route.path.startswith("/api/")}
    )
    for path in api_paths:
        app.add_api_route(path, _options_ok, methods=["OPTIONS"], include_in_schema=False)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=ALLOW_METHODS,
        allow_headers=ALLOW_HEADERS,
        expose_headers=["X-Request-ID", "X-Cache"],
    )
