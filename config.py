"""Application configuration with Pydantic validation.

All settings are loaded from .env file or environment variables.
Validation happens at import time - app fails fast with clear errors.

Usage:
    import config
    print(config.DATABASE_PATH)  # "data/playground.duckdb"
    print(config.WORKBOOK_PATH)  # "data/playground.xlsx"
"""

import logging

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Validated application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore extra env vars
    )

    # Backing stores (empty value = store not configured)
    database_path: str | None = Field(default="data/playground.duckdb")
    workbook_path: str | None = Field(default="data/playground.xlsx")
    upload_dir: str = Field(default="data/uploads")

    # Query execution
    query_timeout: float = Field(default=30.0, description="Seconds per query")
    raw_sql_fragments: bool = Field(
        default=False,
        description="Interpolate filter/order/columns verbatim into SQL (unsafe)",
    )

    # Uploads
    max_upload_bytes: int = Field(default=50_000_000)

    # CORS
    allowed_origins: str = Field(default="http://localhost:3000")

    # Logging
    log_level: str = Field(default="INFO")

    @field_validator("query_timeout")
    @classmethod
    def validate_query_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("QUERY_TIMEOUT must be a positive number of seconds")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"LOG_LEVEL '{v}' is not a logging level")
        return level

    @field_validator("database_path", "workbook_path")
    @classmethod
    def blank_path_is_unset(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            return None
        return v


# Validate at import time - fail fast with clear errors
settings = Settings()

# =============================================================================
# Module-level exports (read at call time, tests may monkeypatch them)
# =============================================================================

# Paths
DATABASE_PATH = settings.database_path
WORKBOOK_PATH = settings.workbook_path
UPLOAD_DIR = settings.upload_dir

# Query execution
QUERY_TIMEOUT = settings.query_timeout
RAW_SQL_FRAGMENTS = settings.raw_sql_fragments

# Uploads
MAX_UPLOAD_BYTES = settings.max_upload_bytes

# CORS
ALLOWED_ORIGINS = settings.allowed_origins.split(",")

# Logging
LOG_LEVEL = settings.log_level
