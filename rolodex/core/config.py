"""Configuration management for the FastAPI application."""
from __future__ import annotations

import os
from functools import lru_cache
from typing import Any

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

load_dotenv()


class Settings(BaseModel):
    """Application configuration loaded from environment variables."""

    app_env: str = "dev"
    database_url: str = "sqlite:///./rolodex.db"
    cors_origins: list[str] = Field(default_factory=list)
    version: str = "0.1.0"
    log_level: str = "INFO"
    auth_header: str = "X-User-Id"
    storage_dir: str = "./storage"
    storage_secret: str = "change-me"
    signed_url_ttl_seconds: int = Field(default=3600, gt=0)
    import_batch_size: int = Field(default=20, gt=0)

    @field_validator("cors_origins", mode="before")
    @classmethod
    def assemble_cors_origins(cls, value: Any) -> list[str]:
        if isinstance(value, str):
            if not value:
                return []
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        if isinstance(value, list):
            return value
        return []

    @property
    def async_database_url(self) -> str:
        if self.database_url.startswith("sqlite+aiosqlite://"):
            return self.database_url
        if self.database_url.startswith("sqlite:///"):
            return self.database_url.replace("sqlite:///", "sqlite+aiosqlite:///")
        if self.database_url.startswith("sqlite://"):
            return self.database_url.replace("sqlite://", "sqlite+aiosqlite://")
        return self.database_url


def _build_settings() -> Settings:
    raw_values: dict[str, Any] = {
        "app_env": os.getenv("APP_ENV"),
        "database_url": os.getenv("DATABASE_URL"),
        "cors_origins": os.getenv("CORS_ORIGINS"),
        "version": os.getenv("APP_VERSION"),
        "log_level": os.getenv("LOG_LEVEL"),
        "auth_header": os.getenv("AUTH_HEADER"),
        "storage_dir": os.getenv("STORAGE_DIR"),
        "storage_secret": os.getenv("STORAGE_SECRET"),
        "signed_url_ttl_seconds": os.getenv("SIGNED_URL_TTL_SECONDS"),
        "import_batch_size": os.getenv("IMPORT_BATCH_SIZE"),
    }
    filtered_values = {key: value for key, value in raw_values.items() if value is not None}
    return Settings(**filtered_values)


@lru_cache()
def get_settings() -> Settings:
    """Return a cached settings instance."""
    return _build_settings()
