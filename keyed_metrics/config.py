"""Runtime configuration loading via Pydantic settings."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Runtime configuration sourced from environment variables."""

    metrics_enabled: bool = Field(default=True, alias="KEYED_METRICS_ENABLED")
    log_level: str = Field(default="INFO", alias="KEYED_METRICS_LOG_LEVEL")
    service_name: str = Field(default="keyed-metrics", alias="KEYED_METRICS_SERVICE_NAME")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        return value.strip().upper()


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()  # type: ignore[call-arg]
