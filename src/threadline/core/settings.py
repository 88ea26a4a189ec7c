"""Application settings and configuration.

This module defines all configuration options for the Threadline data layer.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files. The
    database URL is deliberately optional: an unconfigured store is reported
    by the connection manager instead of failing at import time.
    """

    # Application metadata
    app_name: str = Field(default="Threadline", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    debug: bool = Field(default=False, alias="DEBUG")

    # Database configuration
    database_url: str | None = Field(default=None, alias="DATABASE_URL")
    db_connect_timeout_seconds: float = Field(default=20.0, alias="DB_CONNECT_TIMEOUT_SECONDS")
    db_socket_timeout_seconds: float = Field(default=20.0, alias="DB_SOCKET_TIMEOUT_SECONDS")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # Pagination defaults shared by the list operations
    default_page_size: int = Field(default=20, alias="DEFAULT_PAGE_SIZE")
    max_page_size: int = Field(default=100, alias="MAX_PAGE_SIZE")

    # Cache revalidation
    profile_edit_path: str = Field(default="/profile/edit", alias="PROFILE_EDIT_PATH")
    revalidate_webhook_url: str | None = Field(default=None, alias="REVALIDATE_WEBHOOK_URL")
    revalidate_timeout_seconds: float = Field(default=5.0, alias="REVALIDATE_TIMEOUT_SECONDS")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(default=["*"], alias="CORS_ALLOW_HEADERS")

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
        populate_by_name=True,
    )


settings = Settings()
