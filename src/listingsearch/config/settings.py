from __future__ import annotations

from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment.

    Environment variables are prefixed with ``LISTINGSEARCH_``. Example:
        export LISTINGSEARCH_FEED_URL=https://docs.google.com/.../export?format=csv
    """

    SECRET_KEY: str = "dev-key-change-in-production"
    # Either a CSV export URL or a local CSV file; the local file wins when both are set
    FEED_URL: str | None = None
    FEED_PATH: Path | None = None
    FEED_TIMEOUT: float = 30.0

    PAGE_SIZE: int = 12
    DEFAULT_RELEVANCE: int = 50
    SEARCH_DEBOUNCE_SECONDS: float = 0.3
    POPOVER_IDLE_SECONDS: float = 5.0
    NEARBY_RADIUS_KM: float = 2.0
    SHORTLIST_MAX: int = 3
    EXPORT_DIR: Path = Path("Exports")
    CACHE_MAX_ENTRIES: int = 50

    # pydantic-settings v2 configuration
    model_config = SettingsConfigDict(env_prefix="LISTINGSEARCH_", case_sensitive=False)


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
