"""Application configuration."""

import os

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str = ""
    supabase_anon_key: str = ""
    storage_bucket: str = "photos"
    gallery_table: str = "gallery_photos"
    max_upload_bytes: int = 5 * 1024 * 1024
    session_storage_path: str = ".gallery_session.json"
    date_locale: str = "es_ES"
    eager_image_count: int = 6
    static_root: str = "."
    html_files: str = "index.html,upload.html"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @field_validator("supabase_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.strip().rstrip("/")

    @property
    def is_configured(self) -> bool:
        """Whether both Supabase values are present."""
        return bool(self.supabase_url and self.supabase_anon_key)


def parse_html_files(raw: str | None) -> list[str]:
    """Parse the comma-separated list of HTML files to rewrite."""
    if raw is None:
        return []
    files: list[str] = []
    for chunk in raw.split(","):
        value = chunk.strip()
        if value and value not in files:
            files.append(value)
    return files
