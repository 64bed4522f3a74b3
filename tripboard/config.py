"""Typed settings configuration - single source of truth."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables (prefix TRIPBOARD_)."""

    model_config = SettingsConfigDict(
        env_prefix="TRIPBOARD_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Batch confirmation
    default_currency: str = "AUD"
    itinerary_id_prefix: str = "iti_"

    # Route inference
    transport_travel_mode: str = "transit"
    default_travel_mode: str = "walking"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
