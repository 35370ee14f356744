"""Application configuration."""

import os
from datetime import timedelta

from pydantic_settings import BaseSettings, SettingsConfigDict

from food_catalog.services.cache import CacheConfiguration

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    fdc_api_key: str = ""
    fdc_base_url: str = "https://api.nal.usda.gov/fdc/v1"
    off_base_url: str = "https://world.openfoodfacts.org/api/v2"
    use_mock_data: bool = False
    cache_max_age_seconds: int = 7 * 24 * 60 * 60
    cache_max_size: int = 1000
    retry_attempts: int = 1
    http_timeout_seconds: float = 15.0
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    def cache_configuration(self) -> CacheConfiguration:
        """Build the result cache limits from settings."""
        return CacheConfiguration(
            max_age=timedelta(seconds=self.cache_max_age_seconds),
            max_size=self.cache_max_size,
        )
