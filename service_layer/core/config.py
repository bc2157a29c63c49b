"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Cache backend and TTLs are validated at load time.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from service_layer.core.constants import (
    CACHE_PREFIX_SERVICE,
    DEFAULT_CACHE_TTL,
    DEFAULT_MEMORY_CACHE_SIZE,
    DEFAULT_PAGE_SIZE,
)

CACHE_BACKENDS = ("redis", "memory")
TELEMETRY_EXPORTERS = ("console", "otlp", "none")


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    All settings have defaults; validate_cache rejects unknown cache
    backends, non-positive TTL or page size and unknown span exporters.
    """

    # App
    app_name: str = "service-layer"
    app_version: str = "1.0.0"
    debug: bool = False

    # Database (any SQLAlchemy async URL; empty disables the engine)
    database_url: str = ""
    database_echo: bool = False

    # Cache: "redis" (shared) or "memory" (process-local, tests and single worker)
    cache_backend: str = "redis"
    cache_key_prefix: str = CACHE_PREFIX_SERVICE
    cache_ttl_service: int = DEFAULT_CACHE_TTL  # 6 hours
    cache_memory_maxsize: int = DEFAULT_MEMORY_CACHE_SIZE

    # Redis
    redis_host: str = "localhost"
    redis_port: int = 6379
    redis_db: int = 0
    redis_password: SecretStr | None = None
    redis_socket_timeout: int = 5

    # Pagination
    pagination_default_limit: int = DEFAULT_PAGE_SIZE

    # Telemetry (OpenTelemetry tracing; needs the "telemetry" extra)
    telemetry_enabled: bool = False
    telemetry_exporter: str = "console"  # console, otlp, none
    telemetry_otlp_endpoint: str | None = None
    telemetry_sample_rate: float = 1.0
    telemetry_environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_cache(self) -> "Settings":
        """Validate cache backend, TTL, pagination limit and telemetry exporter."""
        if self.cache_backend not in CACHE_BACKENDS:
            raise ValueError(
                f"cache_backend must be one of {CACHE_BACKENDS}, got: {self.cache_backend!r}"
            )
        if self.cache_ttl_service <= 0:
            raise ValueError("cache_ttl_service must be a positive number of seconds")
        if self.cache_memory_maxsize <= 0:
            raise ValueError("cache_memory_maxsize must be positive")
        if self.pagination_default_limit <= 0:
            raise ValueError("pagination_default_limit must be positive")
        if self.telemetry_exporter not in TELEMETRY_EXPORTERS:
            raise ValueError(
                f"telemetry_exporter must be one of {TELEMETRY_EXPORTERS}, "
                f"got: {self.telemetry_exporter!r}"
            )
        if not 0.0 <= self.telemetry_sample_rate <= 1.0:
            raise ValueError("telemetry_sample_rate must be between 0 and 1")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    In tests, call get_settings.cache_clear() before overriding env vars
    so the next get_settings() uses the new values.
    """
    return Settings()
