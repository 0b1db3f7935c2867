"""
Application configuration via pydantic-settings.
All config read from environment variables with sensible defaults for local dev.
Empty variables (e.g. REDIS_HOST="") fall back to the defaults below.
"""

import logging

from pydantic import Field
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    # App
    app_name: str = "weather-cache-api"
    app_version: str = "1.0.0"
    environment: str = "development"
    port: int = Field(default=8080, ge=1, le=65535)
    log_level: str = "INFO"

    # Redis
    redis_host: str = "localhost"
    redis_port: int = Field(default=6379, ge=1, le=65535)
    redis_connect_attempts: int = Field(default=5, ge=1)
    redis_socket_timeout_s: float = 5.0

    # Cache entries expire 5 minutes after they are written
    cache_ttl_seconds: int = Field(default=300, ge=1)

    # Weather provider
    weather_provider: str = Field(default="synthetic", pattern=r"^(synthetic|openweathermap)$")
    weather_api_key: str = ""
    weather_api_timeout_s: float = 8.0

    # Sentry
    sentry_dsn: str = ""
    sentry_traces_sample_rate: float = Field(default=0.1, ge=0.0, le=1.0)

    model_config = {
        "env_prefix": "",
        "env_file": ".env",
        "extra": "ignore",
        "env_ignore_empty": True,
    }

    def log_summary(self) -> None:
        """Log the loaded configuration. The API key is reported by length only."""
        logger.info("Configuration loaded:")
        logger.info("REDIS_HOST: %s", self.redis_host)
        logger.info("REDIS_PORT: %d", self.redis_port)
        logger.info("PORT: %d", self.port)
        logger.info("ENVIRONMENT: %s", self.environment)
        logger.info("WEATHER_PROVIDER: %s", self.weather_provider)
        logger.info("WEATHER_API_KEY length: %d", len(self.weather_api_key))


settings = Settings()
