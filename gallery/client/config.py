from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="GALLERY_CLIENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_base_url: str = "http://127.0.0.1:8000"
    username: str = ""
    password: str = ""
    page_size: int = Field(default=60, ge=1, le=200)
    refresh_interval_seconds: float = Field(default=30.0, gt=0)
    cache_path: str = ".gallery-cache.json"
    request_timeout_seconds: float = Field(default=20.0, gt=0)
    sentinel_margin: float = Field(default=400.0, ge=0)


@lru_cache
def get_client_settings() -> ClientSettings:
    return ClientSettings()
