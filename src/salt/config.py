"""
Salt - Configuration and settings.

Settings are read from the environment / .env and loaded lazily, so importing
a module never requires a configured environment.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_SOCIAL_IMPORT_API_URL = (
    "https://salt-backend-production.up.railway.app/api/import-social-recipe"
)


class SaltSettings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Supabase
    supabase_url: str
    supabase_anon_key: str
    supabase_service_role_key: str | None = None
    recipe_images_bucket: str = "recipe-images"

    # Application
    salt_env: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    # Recipe import
    social_import_api_url: str = DEFAULT_SOCIAL_IMPORT_API_URL
    http_timeout_seconds: float = 15.0

    # Catalog
    query_timeout_seconds: float = 10.0
    curated_recipes_path: Path | None = None
    autocomplete_debounce_seconds: float = 0.3

    @property
    def is_development(self) -> bool:
        return self.salt_env == "development"

    @property
    def is_production(self) -> bool:
        return self.salt_env == "production"


@lru_cache
def get_settings() -> SaltSettings:
    """Get cached settings instance."""
    return SaltSettings()


class _SettingsProxy:
    """Lazy proxy for settings to avoid loading .env at import time."""

    _instance: SaltSettings | None = None

    def __getattr__(self, name: str):
        if self._instance is None:
            self._instance = get_settings()
        return getattr(self._instance, name)


settings = _SettingsProxy()


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for CLI and server entry points."""
    logging.basicConfig(
        level=level or settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
