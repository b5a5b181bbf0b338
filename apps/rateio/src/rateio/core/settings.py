"""Application settings loaded from environment variables."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime settings for the property harness, adapters, and persistence."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    database_url: str = Field(
        default="sqlite+pysqlite:///./rateio.db",
        alias="DATABASE_URL",
    )
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    default_trials: int = Field(default=1000, alias="RATEIO_DEFAULT_TRIALS", ge=0)
    workers: int = Field(default=1, alias="RATEIO_WORKERS", ge=1, le=64)
    max_shrink_steps: int = Field(
        default=10_000,
        alias="RATEIO_MAX_SHRINK_STEPS",
        ge=0,
    )
    shrink_timeout_seconds: float | None = Field(
        default=None,
        alias="RATEIO_SHRINK_TIMEOUT_SECONDS",
        gt=0,
    )
    allow_negative: bool = Field(default=True, alias="RATEIO_ALLOW_NEGATIVE")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance for the current process."""

    return Settings()
