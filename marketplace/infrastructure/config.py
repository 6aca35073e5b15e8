"""Application configuration.

Loads settings from environment variables with sensible defaults.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API
    api_version: str = "0.1.0"
    debug: bool = False

    # Database
    database_url: str = "postgresql+asyncpg://marketplace:marketplace_dev_password@db:5432/marketplace"
    storage_backend: str = "postgres"  # postgres | memory

    # Cache
    redis_url: str = "redis://redis:6379/0"
    cache_backend: str = "redis"  # redis | memory | none
    cache_ttl_seconds: int = 300

    # Pagination
    default_page_size: int = 20
    max_page_size: int = 100

    # Logging
    log_level: str = "INFO"
    log_format: str = "json"  # json | console

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
