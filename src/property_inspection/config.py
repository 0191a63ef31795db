"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class ClientSettings(BaseSettings):
    """Settings an inspection session needs to talk to the API."""

    public_base_url: str = "http://localhost:8000"
    upload_timeout_seconds: float = 120.0
    max_video_seconds: int = 120
    max_image_width: int = 1920
    max_image_height: int = 1080
    image_quality: int = 80
    ffprobe_path: str = "ffprobe"
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


class Settings(ClientSettings):
    """Server settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    admin_token: str
    upload_dir: str = "uploads"
    drive_mirror_enabled: bool = True
    drive_root_folders: str = "Property Photos"
    google_client_id: str | None = None
    google_client_secret: str | None = None


def parse_feature_notes(raw: str | None) -> tuple[str, ...]:
    """Parse free-text property notes into special-feature labels."""
    if raw is None:
        return ()
    features: list[str] = []
    for chunk in raw.split(","):
        value = chunk.strip()
        if not value:
            continue
        features.append(value)
    return tuple(features)


def parse_folder_path(raw: str) -> list[str]:
    """Parse the comma-separated mirror folder path."""
    return [chunk.strip() for chunk in raw.split(",") if chunk.strip()]
