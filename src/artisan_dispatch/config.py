"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

DEFAULT_CATEGORIES = "Electrical,Plumbing,Carpentry"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    whatsapp_access_token: str
    whatsapp_phone_number_id: str
    whatsapp_verify_token: str
    whatsapp_app_secret: str | None = None
    whatsapp_graph_version: str = "v21.0"
    admin_token: str
    support_identity: str | None = None
    support_phone_display: str = "09045955670"
    service_categories: str = DEFAULT_CATEGORIES
    broadcast_limit: int = 3
    stale_ticket_minutes: int = 60
    dedupe_ttl_seconds: int = 600
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_categories(raw: str | None) -> dict[str, str]:
    """Map menu digits to category names from a comma-separated list."""
    cleaned = (raw or "").strip() or DEFAULT_CATEGORIES
    names = [chunk.strip() for chunk in cleaned.split(",") if chunk.strip()]
    return {str(index): name for index, name in enumerate(names, start=1)}
