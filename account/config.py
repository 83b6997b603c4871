"""
Configuration for the account transaction ledger.

Values come from environment variables prefixed with ``ACCOUNT_`` or from a
local ``.env`` file.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="ACCOUNT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    app_name: str = Field(default="account-ledger", description="Service name reported by /health")
    environment: str = Field(default="development")
    log_level: str = Field(default="INFO", description="Root log level for structlog output")

    cancel_window_years: int = Field(
        default=1,
        ge=1,
        description="How many calendar years a use transaction stays cancellable"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
