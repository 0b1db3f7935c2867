"""
Sentry instrumentation for the FastAPI service.
Off unless SENTRY_DSN is set. Scrubs sensitive headers and the OpenWeatherMap
`appid` query parameter (the API key) before events leave the process.
"""

import re
from typing import Any

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration

from services.weather_api.config import Settings

SENSITIVE_HEADERS = {"authorization", "cookie", "set-cookie", "x-api-key"}

_APPID_RE = re.compile(r"(appid=)[^&\s]+", re.IGNORECASE)


def _filter_headers(headers: Any) -> None:
    if isinstance(headers, dict):
        for key in list(headers.keys()):
            if key.lower() in SENSITIVE_HEADERS:
                headers[key] = "[FILTERED]"


def _filter_appid(value: Any) -> Any:
    if isinstance(value, str):
        return _APPID_RE.sub(r"\1[FILTERED]", value)
    return value


def _strip_sensitive_data(event: dict[str, Any], hint: dict[str, Any]) -> dict[str, Any] | None:
    """before_send hook: filter headers and the upstream API key."""
    request = event.get("request", {})
    if isinstance(request, dict):
        _filter_headers(request.get("headers"))
        if "query_string" in request:
            request["query_string"] = _filter_appid(request["query_string"])
        if "url" in request:
            request["url"] = _filter_appid(request["url"])

    # httpx breadcrumbs carry the full upstream URL, query string included
    if "breadcrumbs" in event:
        for breadcrumb in event["breadcrumbs"].get("values", []):
            data = breadcrumb.get("data", {})
            if isinstance(data, dict):
                _filter_headers(data.get("headers"))
                if "url" in data:
                    data["url"] = _filter_appid(data["url"])
                if "http.query" in data:
                    data["http.query"] = _filter_appid(data["http.query"])
    return event


def setup_sentry(settings: Settings) -> bool:
    """Initialise sentry-sdk. Returns False when no DSN is configured."""
    if not settings.sentry_dsn:
        return False

    sentry_sdk.init(
        dsn=settings.sentry_dsn,
        environment=settings.environment,
        release=f"{settings.app_name}@{settings.app_version}",
        traces_sample_rate=settings.sentry_traces_sample_rate,
        before_send=_strip_sensitive_data,
        integrations=[
            StarletteIntegration(transaction_style="endpoint"),
            FastApiIntegration(transaction_style="endpoint"),
        ],
        send_default_pii=False,
    )
    return True
