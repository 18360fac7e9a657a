"""API configuration via pydantic-settings."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_prefix="POLICYKIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Server configuration
    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    env: Literal["production", "staging", "development", "test"] = "development"
    log_level: str = "INFO"

    # API configuration
    api_title: str = "PolicyKit API"
    api_version: str = "1.0.0"

    # CORS origins
    cors_origins: list[str] = ["http://localhost:3000"]

    # === POLICY SETTINGS ===
    default_detail_level: Literal["essential", "standard", "comprehensive"] = "standard"
    custom_catalog_path: Path | None = None

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.env == "production"
