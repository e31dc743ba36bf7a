"""Runtime configuration loaded from environment via pydantic-settings."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Local endpoint configuration for compatibility negotiation."""

    model_config = SettingsConfigDict(
        env_prefix="PEER_COMPAT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"] = "INFO"
    log_format: Literal["console", "json"] = Field("console", description="Renderer for log output.")
    environment: Literal["production", "development"] = Field(
        "production",
        description="Development builds run the strict verification checks.",
    )

    root_version: str = Field("1.0.0", description="Locally-running ROOT feature version.")
    translations_version: str = Field("1.0.0", description="Locally-running TRANSLATIONS feature version.")
    emojis_version: str = Field("1.0.0", description="Locally-running EMOJIS feature version.")

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator("environment", "log_format", mode="before")
    @classmethod
    def _lowercase_choice(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("root_version", "translations_version", "emojis_version")
    @classmethod
    def _require_version_text(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("feature version must not be blank")
        return value

    @property
    def strict_validation(self) -> bool:
        """Whether verification-only checks should run."""
        return self.environment != "production"


@lru_cache(1)
def get_settings() -> Settings:
    """Return cached Settings instance."""

    return Settings()


__all__ = ["Settings", "get_settings"]
