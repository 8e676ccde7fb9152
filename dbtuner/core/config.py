"""Application configuration loaded from environment variables."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Central configuration, read from env vars / .env file."""

    # --- Target ---
    target_db: str = Field(default="", alias="TARGET_DB")
    output_dir: str = Field(default="", alias="OUTPUT_DIR")

    # --- Report ---
    safe_mode: bool = Field(default=True, alias="SAFE_MODE")
    export_schema: bool = Field(default=True, alias="EXPORT_SCHEMA")

    # --- SQL Server connection ---
    db_host: str = Field(default="localhost", alias="DB_HOST")
    db_port: int = Field(default=1433, alias="DB_PORT")
    db_user: str = Field(default="", alias="DB_USER")
    db_password: str = Field(default="", alias="DB_PASSWORD")

    # --- Bounded waits ---
    login_timeout_seconds: int = Field(default=15, alias="LOGIN_TIMEOUT_SECONDS")
    query_timeout_seconds: int = Field(default=60, alias="QUERY_TIMEOUT_SECONDS")
    lock_timeout_ms: int = Field(default=15000, alias="LOCK_TIMEOUT_MS")

    # --- App ---
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        "frozen": True,
        "populate_by_name": True,
    }


def get_settings(**overrides: object) -> Settings:
    """Return a Settings instance, applying non-None overrides by field name."""
    values = {key: value for key, value in overrides.items() if value is not None}
    return Settings(**values)
