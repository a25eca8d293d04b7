"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    fdc_api_key: str | None = None
    fdc_base_url: str = "https://api.nal.usda.gov/fdc/v1"
    off_base_url: str = "https://world.openfoodfacts.org/api/v2"
    user_agent: str = "food-resolver/0.1"
    lookup_timeout_seconds: float = 15
    search_timeout_seconds: float = 10
    product_cache_ttl_seconds: int = 3600
    generic_page_size: int = 15
    branded_page_size: int = 10
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def has_fdc_credentials(self) -> bool:
        """Return whether a usable FDC API key is configured."""
        return bool(self.fdc_api_key and self.fdc_api_key.strip())
