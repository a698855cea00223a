"""
Runtime configuration helpers for the relationship backend.

Loads DATABASE_URL and the relationship tuning knobs from the environment,
falling back to the .env file located in the project root.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve the project root
BASE_DIR = Path(__file__).resolve().parents[1]

ENV_PATH = BASE_DIR / ".env"

# Load .env defaults without overriding environment variables provided by the platform
load_dotenv(dotenv_path=ENV_PATH, override=False)


class Settings(BaseSettings):
    # Required field: must come from the environment or .env
    database_url: str = Field(..., alias="DATABASE_URL")

    app_name: str = Field(default="Social Graph Backend", alias="APP_NAME")
    api_version: str = Field(default="0.1.0", alias="API_VERSION")

    # Optimistic-concurrency retries for the two-profile follow write
    follow_write_retries: int = Field(default=3, ge=1, alias="FOLLOW_WRITE_RETRIES")
    # Interval of the background follow-graph sweep; 0 keeps it off
    consistency_sweep_minutes: int = Field(default=0, ge=0, alias="CONSISTENCY_SWEEP_MINUTES")

    model_config = SettingsConfigDict(
        env_file=str(ENV_PATH),
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()


__all__ = ["Settings", "get_settings"]
