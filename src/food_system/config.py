"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    environment: str = _ENVIRONMENT
    storage_backend: str = "memory"
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    session_capacity: int = 1000
    session_ttl_seconds: int = 86400
    sensor_simulation: bool = True
    sensor_polling_interval_ms: int = 1000
    hardware_gateway_url: str | None = None
    hardware_timeout_seconds: float = 5.0
    rate_limit_window_seconds: int = 900
    rate_limit_max_requests: int = 100
    cooking_rate_limit_window_seconds: int = 300
    cooking_rate_limit_max_requests: int = 10
    rate_limit_cleanup_interval_seconds: int = 300
    waste_adjustment_threshold: float = 0.15
    consultation_required: bool = True
    max_adjustment_per_cycle: float = 0.20
    learning_rate: float = 0.1

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_storage_backend(raw: str | None) -> str:
    """Normalize the configured storage backend name."""
    if raw is None:
        return "memory"
    cleaned = raw.strip().lower()
    if cleaned in {"", "memory", "in-memory", "inmemory"}:
        return "memory"
    if cleaned == "supabase":
        return "supabase"
    raise ValueError(f"Unknown storage backend: {raw}")
