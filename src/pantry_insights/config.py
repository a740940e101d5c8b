"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    openai_api_key: str
    openai_model: str = "gpt-4.1-mini"
    openai_store: bool = False
    advisory_temperature: float = 0.3
    advisory_timeout_seconds: float = 30.0
    advisory_max_output_tokens: int = 6000
    catalog_sample_size: int = 50
    price_api_base_url: str | None = None
    price_lookup_delay_seconds: float = 1.0
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
