"""API service configuration.

All tunables live on a single `Settings` object built with `pydantic-settings`.
Values come from environment variables (case-insensitive) or an optional
`.env` file in the working directory; invalid values fail fast at startup.

Use `get_settings()` everywhere instead of instantiating `Settings` directly so
the environment is parsed once per process.
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from homelab_common.db import database_url as resolve_database_url


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: str = Field(default_factory=resolve_database_url)
    # comma-separated, e.g. CORS_ORIGINS=http://localhost:5173,http://nas.lan
    cors_origins: str = "http://localhost:5173,http://127.0.0.1:5173"

    log_level: str = "INFO"
    log_file: str | None = None

    http_user_agent: str = "Mozilla/5.0 (compatible; RSS Reader)"
    probe_timeout_seconds: float = Field(5.0, gt=0)

    rss_items_per_feed: int = Field(10, ge=1)
    rss_combined_limit: int = Field(20, ge=1)
    rss_description_chars: int = Field(200, ge=1)
    rss_timeout_seconds: float = Field(10.0, gt=0)

    coingecko_url: str = "https://api.coingecko.com/api/v3/simple/price"
    coingecko_api_key: str | None = None
    bitcoin_cache_seconds: float = Field(60.0, ge=0)

    glances_default_url: str = "http://localhost:61208"
    glances_timeout_seconds: float = Field(3.0, gt=0)

    sweep_interval_seconds: int = Field(0, ge=0)

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        return value.strip().upper()

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()
