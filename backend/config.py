"""Application configuration using pydantic-settings."""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Database
    DATABASE_URL: str = "sqlite:///./saldo.db"

    # Accounts
    DEFAULT_CURRENCY: str = "EUR"

    # Daily snapshot job (runs once per day for every user)
    SNAPSHOT_JOB_ENABLED: bool = True
    SNAPSHOT_JOB_HOUR: int = 23
    SNAPSHOT_JOB_MINUTE: int = 59

    # Historical backfill
    DEMO_HISTORY_DAYS: int = 90
    BACKFILL_BATCH_SIZE: int = 500

    # Frontend origins allowed by CORS
    CORS_ORIGINS: list[str] = ["http://localhost:5173"]

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize LOG_LEVEL to an uppercase Python logging level."""
        valid = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid:
            raise ValueError(f"LOG_LEVEL must be one of {valid}, got {v!r}")
        return v.upper()

    @field_validator("DEFAULT_CURRENCY", mode="before")
    @classmethod
    def normalize_currency(cls, v: str) -> str:
        """Currency codes are stored upper-case (ISO 4217)."""
        if isinstance(v, str):
            v = v.strip().upper()
        return v

    @field_validator("BACKFILL_BATCH_SIZE")
    @classmethod
    def validate_batch_size(cls, v: int) -> int:
        if v < 1:
            raise ValueError("BACKFILL_BATCH_SIZE must be at least 1")
        return v

    # App settings
    ENVIRONMENT: str = "development"
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"


settings = Settings()
