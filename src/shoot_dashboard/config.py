"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    api_base_url: str = "http://localhost:8000"
    admin_token: str
    bridge_data_token: str = ""
    bridge_data_base_url: str = "https://api.bridgedataoutput.com/api/v2"
    geocoder_base_url: str = "https://nominatim.openstreetmap.org"
    geocoder_user_agent: str = "shoot-dashboard/0.1"
    default_tax_rate: float = 0.0
    request_timeout_seconds: float = 15
    geocode_ttl_seconds: int = 86400
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def normalize_api_base_url(raw: str) -> str:
    """Return the backend URL with exactly one trailing ``/api`` segment."""
    cleaned = raw.strip().rstrip("/")
    while cleaned.endswith("/api"):
        cleaned = cleaned[: -len("/api")].rstrip("/")
    return f"{cleaned}/api"
