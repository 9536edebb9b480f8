from __future__ import annotations

from functools import lru_cache
from urllib.parse import quote_plus

from pydantic import Field, PostgresDsn, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


def _build_postgres_dsn(
    *,
    host: str,
    port: int,
    name: str,
    user: str,
    password: str,
    ssl_mode: str,
) -> str:
    encoded_user = quote_plus(user)
    encoded_password = quote_plus(password) if password else ""
    auth = f"{encoded_user}:{encoded_password}" if encoded_password else encoded_user
    dsn = f"postgresql://{auth}@{host}:{port}/{name}"
    if ssl_mode:
        dsn = f"{dsn}?sslmode={quote_plus(ssl_mode)}"
    return dsn


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    environment: str = Field(default="development", validation_alias="ENVIRONMENT")

    db_host: str = Field(default="localhost", validation_alias="DB_HOST")
    db_port: int = Field(default=5432, validation_alias="DB_PORT")
    db_name: str = Field(default="gallery_dev", validation_alias="DB_NAME")
    db_user: str = Field(default="gallery", validation_alias="DB_USER")
    db_password: str = Field(default="gallery", validation_alias="DB_PASSWORD")
    db_ssl_mode: str = Field(default="prefer", validation_alias="DB_SSL_MODE")

    database_url: PostgresDsn | None = Field(default=None, validation_alias="DATABASE_URL")

    gallery_user: str = Field(default="admin", validation_alias="GALLERY_USER")
    gallery_pass: str = Field(default="password", validation_alias="GALLERY_PASS")
    jwt_secret: str = Field(default="change-me", validation_alias="JWT_SECRET")
    jwt_ttl_seconds: int = Field(default=365 * 24 * 3600, validation_alias="JWT_TTL_SECONDS")

    turnstile_secret_key: str = Field(default="", validation_alias="TURNSTILE_SECRET_KEY")
    turnstile_verify_url: str = Field(
        default="https://challenges.cloudflare.com/turnstile/v0/siteverify",
        validation_alias="TURNSTILE_VERIFY_URL",
    )

    bot_token: str = Field(default="", validation_alias="BOT_TOKEN")
    file_api_base: str = Field(default="https://api.telegram.org", validation_alias="FILE_API_BASE")
    file_proxy_base: str = Field(
        default="https://tgapi.kairod.cfd",
        validation_alias="FILE_PROXY_BASE",
    )
    upstream_timeout_seconds: float = Field(default=20.0, validation_alias="UPSTREAM_TIMEOUT_SECONDS")

    frontend_origins: str = Field(default="*", validation_alias="FRONTEND_ORIGINS")

    gallery_default_page_size: int = Field(default=60, validation_alias="GALLERY_DEFAULT_PAGE_SIZE")
    gallery_max_page_size: int = Field(default=200, validation_alias="GALLERY_MAX_PAGE_SIZE")
    gallery_legacy_limit: int = Field(default=200, validation_alias="GALLERY_LEGACY_LIMIT")
    gallery_list_max_age_seconds: int = Field(default=60, validation_alias="GALLERY_LIST_MAX_AGE_SECONDS")
    file_max_age_seconds: int = Field(default=31_536_000, validation_alias="FILE_MAX_AGE_SECONDS")

    @computed_field
    @property
    def database_dsn(self) -> str:
        if self.database_url is not None:
            return str(self.database_url)
        return _build_postgres_dsn(
            host=self.db_host,
            port=self.db_port,
            name=self.db_name,
            user=self.db_user,
            password=self.db_password,
            ssl_mode=self.db_ssl_mode,
        )

    @property
    def frontend_origin_list(self) -> list[str]:
        origins = [item.strip() for item in self.frontend_origins.split(",")]
        return [item for item in origins if item] or ["*"]


@lru_cache
def get_settings() -> Settings:
    return Settings()
