# ABOUTME: Centralized configuration using Pydantic Settings.
# ABOUTME: Loads database, analytics window, logging, and web settings from the environment.

from functools import lru_cache

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database
    db_host: str = "localhost"
    db_port: int = 5432
    db_name: str = "newsletter"
    db_user: str = "newsletter"
    db_password: SecretStr | None = None
    db_pool_size: int = 5
    db_pool_max_overflow: int = 10

    @property
    def database_url(self) -> str:
        """Build async PostgreSQL connection URL."""
        password = self.db_password.get_secret_value() if self.db_password else ""
        return (
            f"postgresql+asyncpg://{self.db_user}:{password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )

    @property
    def database_url_sync(self) -> str:
        """Build sync PostgreSQL connection URL (for Alembic)."""
        password = self.db_password.get_secret_value() if self.db_password else ""
        return (
            f"postgresql://{self.db_user}:{password}@{self.db_host}:{self.db_port}/{self.db_name}"
        )

    # Analytics windows and limits
    default_window_days: int = 30
    engagement_window_days: int = 30
    max_window_days: int = 365
    newsletter_comparison_limit: int = 10
    overview_newsletter_scan_limit: int = 100  # Enough to cover every issue in a window
    top_sources_limit: int = 10
    top_cities_limit: int = 20
    top_clicked_limit: int = 20
    subscriber_list_limit: int = 20

    # Logging
    log_level: str = "INFO"
    log_format: str = "console"  # "console" or "json"

    # Web / API
    scheduler_audience: str = ""  # OIDC audience for Cloud Scheduler verification


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Settings are loaded from environment variables and .env file.
    """
    return Settings()
