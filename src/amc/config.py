"""Configuration settings for the AMC Tracks service."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="AMC_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    # Application
    app_name: str = "AMC Dental Hub Tracks"
    debug: bool = False
    environment: str = "development"
    log_level: str = "INFO"

    # Database
    # Default to Postgres; tests override via AMC_DB_URL
    db_url: str = "postgresql+asyncpg://localhost/amc_hub"
    db_pool_size: int = 10
    db_max_overflow: int = 20

    # CORS
    cors_origins: list[str] = [
        "https://hub.airlignmastery.com",
        "http://localhost:5173",
        "http://localhost:8080",
    ]

    # Rate Limiting
    rate_limit_requests: int = 120
    rate_limit_window: int = 60  # seconds

    @property
    def expose_error_details(self) -> bool:
        """Whether store diagnostics may be returned to callers."""
        return self.debug or self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
