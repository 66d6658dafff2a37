# src/algoimpact/config/settings.py
"""
Settings - Pydantic-based Configuration Management

Provides centralized configuration management using Pydantic Settings.
Supports environment variables (and a .env file) with validation.

Files that USE this module:
- algoimpact.app (loads settings for the streaming driver)
- algoimpact.adapters.indexer.client (indexer URL, token and HTTP timeout)

Files that this module USES:
- algoimpact.shared.validators (validation functions for settings)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

from typing import Optional  # Type hints for optional values

from pydantic import Field, field_validator  # Data validation and field configuration
from pydantic_settings import BaseSettings, SettingsConfigDict  # Settings management with Pydantic

from algoimpact.shared.validators import (
    validate_indexer_url,  # Validate indexer base URL format
    validate_log_level,  # Validate logging level names
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Indexer ---
    indexer_url: str = Field(default="https://mainnet-idx.algonode.cloud", alias="INDEXER_URL")
    indexer_token: str = Field(default="", alias="INDEXER_TOKEN")

    # --- HTTP Settings ---
    http_timeout_seconds: int = Field(default=10, alias="HTTP_TIMEOUT_SECONDS", ge=1, le=120)

    # --- Impact options used by the streaming driver ---
    convert_decimals: bool = Field(default=True, alias="CONVERT_DECIMALS")
    unit_name_keys: bool = Field(default=True, alias="UNIT_NAME_KEYS")
    include_fees: bool = Field(default=False, alias="INCLUDE_FEES")

    # --- Streaming ---
    page_pause_seconds: float = Field(default=1.0, alias="PAGE_PAUSE_SECONDS", ge=0.0)
    block_cache_size: int = Field(default=256, alias="BLOCK_CACHE_SIZE", ge=1)

    # --- Logging ---
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_file: Optional[str] = Field(default=None, alias="LOG_FILE")
    log_dir: Optional[str] = Field(default=None, alias="LOG_DIR")
    log_stdout: bool = Field(default=False, alias="ALGOIMPACT_LOG_STDOUT")
    log_max_bytes: int = Field(default=10 * 1024 * 1024, alias="LOG_MAX_BYTES")  # 10MB
    log_backup_count: int = Field(default=5, alias="LOG_BACKUP_COUNT")

    @field_validator("indexer_url")
    @classmethod
    def validate_indexer_url(cls, v: str) -> str:
        """Validate indexer URL format and strip the trailing slash."""
        if not validate_indexer_url(v):
            raise ValueError("INDEXER_URL must be an http(s) URL")
        return v.rstrip("/")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate logging level name."""
        if not validate_log_level(v):
            raise ValueError("LOG_LEVEL must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL")
        return v.upper()


# Global settings instance
settings = Settings()
