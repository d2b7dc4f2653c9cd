"""Application configuration utilities."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

StorageBackendName = Literal["memory", "file", "redis", "database"]


class Settings(BaseSettings):
    """Settings derived from environment variables."""

    storage_backend: StorageBackendName = Field(
        default="file", alias="STORAGE_BACKEND"
    )
    invoice_storage_key: str = Field(default="invoices", alias="INVOICE_STORAGE_KEY")
    local_storage_path: str = Field(
        default="/tmp/finance-dashboard", alias="LOCAL_STORAGE_PATH"
    )
    redis_url: str = Field(default="redis://localhost:6379/0", alias="REDIS_URL")
    database_url: str = Field(
        default="sqlite:///./finance.db", alias="DATABASE_URL"
    )
    revenue_window_months: int = Field(
        default=6, ge=1, le=36, alias="REVENUE_WINDOW_MONTHS"
    )
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )


@lru_cache()
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()


__all__ = ["Settings", "StorageBackendName", "get_settings"]
