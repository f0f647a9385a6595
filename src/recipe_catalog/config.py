"""Application configuration."""

import os
from typing import Literal

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    storage_backend: Literal["supabase", "memory"] = "supabase"
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    storage_bucket: str = "recipe-images"
    session_secret: str
    session_max_age_seconds: int = 14 * 24 * 60 * 60
    upload_target_ttl_seconds: int = 900
    public_base_url: str = "http://localhost:8000"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @model_validator(mode="after")
    def _require_supabase_credentials(self) -> "Settings":
        if self.storage_backend == "supabase" and not (
            self.supabase_url and self.supabase_service_key
        ):
            raise ValueError(
                "supabase_url and supabase_service_key are required "
                "for the supabase storage backend"
            )
        return self

    @property
    def upload_base_url(self) -> str:
        """Base URL that issued upload targets point at."""
        return f"{self.public_base_url.rstrip('/')}/api/objects/uploads"
