from __future__ import annotations

import os

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict


# Load .env early for local development
load_dotenv()


def _optional_int(name: str, default: int | None = None) -> int | None:
    raw = os.getenv(name, "").strip()
    return int(raw) if raw else default


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(env_file=".env", env_ignore_empty=True)

    # Database
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./spotrate.db")

    # Request handling
    request_timeout_seconds: float = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "10"))
    mutation_retry_attempts: int = int(os.getenv("MUTATION_RETRY_ATTEMPTS", "3"))

    # Aggregates: number of decimals kept on stored averages (None = unrounded)
    review_average_precision: int | None = _optional_int("REVIEW_AVERAGE_PRECISION", 1)
    solo_friendly_average_precision: int | None = _optional_int("SOLO_FRIENDLY_AVERAGE_PRECISION")

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_dir: str = os.getenv("LOG_DIR", "./logs")


settings = Settings()
