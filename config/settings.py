"""
Application settings loaded from environment variables.

Uses pydantic-settings for validation and type safety.
Values are read once and handed to collaborators at construction time.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from functools import lru_cache
from typing import Optional


class Settings(BaseSettings):
    """
    Application settings.

    All values loaded from .env file or environment variables.
    Validation happens automatically on startup.
    """

    model_config = SettingsConfigDict(
        env_file=(".env", "../.env"),  # Check current dir, then parent
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"  # Ignore extra env vars
    )

    # ===================
    # SHOPIFY ADMIN API
    # ===================
    shopify_store_domain: str = Field(
        default="",
        description="Store hostname, e.g. my-store.myshopify.com"
    )
    shopify_access_token: str = Field(
        default="",
        description="Admin API access token"
    )
    shopify_api_version: str = Field(
        default="2025-04",
        pattern=r"^\d{4}-\d{2}$",
        description="Admin API version path segment"
    )

    # ===================
    # WEBHOOK SECURITY
    # ===================
    shopify_webhook_secret: Optional[str] = Field(
        None,
        description="Shared secret used to sign webhooks"
    )
    verify_webhooks: bool = Field(
        default=False,
        description="Reject webhooks without a valid X-Shopify-Hmac-SHA256 header"
    )

    # ===================
    # OUTBOUND HTTP
    # ===================
    http_timeout_seconds: Optional[float] = Field(
        None,
        gt=0,
        description="Timeout for CSV downloads and Admin API calls (none by default)"
    )
    csv_chunk_size: int = Field(
        default=500,
        ge=1,
        le=100000,
        description="Rows parsed per chunk while streaming a CSV"
    )

    # ===================
    # APP SETTINGS
    # ===================
    environment: str = Field(
        default="development",
        pattern="^(development|staging|production)$",
        description="Application environment"
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Logging level"
    )
    host: str = Field(
        default="0.0.0.0",
        description="Listen address"
    )
    port: int = Field(
        default=3000,
        ge=1,
        le=65535,
        description="Listen port"
    )
    shutdown_mode: str = Field(
        default="drain",
        pattern="^(drain|ignore)$",
        description="drain: graceful shutdown on SIGTERM/SIGINT; ignore: log and keep serving"
    )
    allowed_origins: list[str] = Field(
        default=["*"],
        description="CORS allowed origins"
    )

    # ===================
    # COMPUTED PROPERTIES
    # ===================
    @property
    def is_production(self) -> bool:
        """Check if running in production."""
        return self.environment == "production"

    @property
    def shopify_configured(self) -> bool:
        """Check if the Admin API credentials are present."""
        return bool(self.shopify_store_domain and self.shopify_access_token)


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload.

    Returns:
        Settings: Application settings

    Raises:
        ValidationError: If env vars are invalid
    """
    return Settings()


# For convenient imports: from config.settings import settings
settings = get_settings()
