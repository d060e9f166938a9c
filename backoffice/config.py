"""Application configuration settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ENV_FILE = ".env"
ENV_FILE_ENCODING = "utf-8"


class Settings(BaseSettings):
    """Application configuration values loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE, env_file_encoding=ENV_FILE_ENCODING, extra="ignore"
    )

    database_url: str = Field(
        description="Database connection URL used by SQLAlchemy to connect to the DB",
        min_length=1,
    )
    secret_key: str = Field(
        description="Secret key for signing JWT tokens", min_length=1
    )
    access_token_expire_minutes: int = Field(
        default=60,
        description="Number of minutes before access tokens expire",
        gt=0,
    )
    environment: str = Field(
        default="production",
        description="Deployment environment; 'development' exposes error details",
    )
    log_level: str = Field(default="INFO", description="Root logging level")
    app_timezone: str = Field(
        default="UTC", description="Timezone used to store and display datetimes"
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173"],
        description="Origins allowed to call the API from a browser",
    )
    site_name: str = Field(default="Sello", description="Name shown in emails")
    frontend_url: str = Field(
        default="http://localhost:5173",
        description="Storefront URL used as call-to-action destination in emails",
    )
    email_notifications_enabled: bool = Field(
        default=False,
        description="Process-wide switch for promotion and notification emails",
    )
    sendgrid_api_key: str | None = Field(
        default=None,
        description="SendGrid API key used for sending transactional emails via the REST API",
    )
    sendgrid_sender: str | None = Field(
        default=None,
        description="Email address that will appear as the sender of transactional messages",
        min_length=3,
    )
    audience_member_limit: int = Field(
        default=1000,
        description="Maximum number of users resolved for a single audience",
        gt=0,
    )
    notification_batch_size: int = Field(
        default=100,
        description="Number of notifications written per persistence batch",
        gt=0,
    )
    email_max_workers: int = Field(
        default=8,
        description="Concurrent email sends during a fan-out",
        gt=0,
    )

    @model_validator(mode="after")
    def _validate_sendgrid_pair(self) -> "Settings":
        if bool(self.sendgrid_api_key) ^ bool(self.sendgrid_sender):
            raise ValueError(
                "SENDGRID_API_KEY and SENDGRID_SENDER must both be provided to enable email"
            )
        if self.sendgrid_sender and "@" not in self.sendgrid_sender:
            raise ValueError("SENDGRID_SENDER must be a valid email address")
        return self

    @property
    def is_development(self) -> bool:
        return self.environment.strip().lower() == "development"


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""

    return Settings()


def reset_settings_cache() -> None:
    """Clear the settings cache to force reloading from the environment."""

    get_settings.cache_clear()


__all__ = ["Settings", "get_settings", "reset_settings_cache"]
