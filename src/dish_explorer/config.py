"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

STORAGE_BACKENDS = {"supabase", "file", "memory"}


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    mealdb_base_url: str = "https://www.themealdb.com/api/json/v1/1"
    openfoodfacts_base_url: str = "https://world.openfoodfacts.org"
    http_timeout_seconds: float = 15
    storage_backend: str = "file"
    storage_path: str = ".dish_explorer/storage.json"
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    supabase_table: str = "kv_store"
    local_dataset_path: str | None = None
    max_history: int = 50
    fetch_retry_attempts: int = 1
    fetch_retry_delay_seconds: float = 0.3
    lookup_cache_ttl_seconds: int = 3600
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_prefix="DISH_EXPLORER_",
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_storage_backend(raw: str | None) -> str:
    """Normalize the configured storage backend name."""
    if raw is None:
        return "file"
    cleaned = raw.strip().lower()
    if not cleaned:
        return "file"
    if cleaned not in STORAGE_BACKENDS:
        raise ValueError(f"Unsupported storage backend: {raw}")
    return cleaned
