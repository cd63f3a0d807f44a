"""Application configuration."""

import os
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    product_source: Literal["static", "openfoodfacts"] = "static"
    openfoodfacts_base_url: str = "https://world.openfoodfacts.org"
    openfoodfacts_user_agent: str = "NutrientScanner/0.1 (dev@nutrient-scanner.local)"
    history_backend: Literal["memory", "supabase"] = "memory"
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    scoring_policy_path: str | None = None
    product_cache_ttl_seconds: int = 86400
    product_miss_ttl_seconds: int = 300
    lookup_retry_attempts: int = 1
    history_limit: int = 50
    debug: bool = False
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
