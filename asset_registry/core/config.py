from __future__ import annotations

from functools import lru_cache

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Environment-driven application configuration."""

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    APP_NAME: str = "Asset Registry"
    LOG_LEVEL: str = "INFO"
    METRICS_ENABLED: bool = True

    DB_URL: str = Field(default="sqlite:///./assets.db", validation_alias=AliasChoices("DB_URL", "DATABASE_URL"))

    # "scan" walks every record; "indexed" pushes the comparison into SQL.
    DUPLICATE_STRATEGY: str = "scan"

    @field_validator("DUPLICATE_STRATEGY", mode="before")
    @classmethod
    def parse_strategy(cls, value: object) -> str:
        name = str(value or "scan").strip().lower()
        if name not in ("scan", "indexed"):
            raise ValueError("DUPLICATE_STRATEGY must be 'scan' or 'indexed'")
        return name

    @field_validator("LOG_LEVEL", mode="before")
    @classmethod
    def parse_log_level(cls, value: object) -> str:
        return str(value or "INFO").strip().upper()


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    return AppSettings()
