"""
Configuration settings for the Record Vault.

Uses Pydantic Settings to load environment variables for database connections,
storage backend selection, backup/export locations, and logging.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Database
    db_host: str = Field("localhost", alias="DB_HOST")
    db_port: int = Field(5432, alias="DB_PORT")
    db_user: str = Field("postgres", alias="DB_USER")
    db_password: str = Field("postgres", alias="DB_PASSWORD")
    db_name: str = Field("vault", alias="DB_NAME")
    db_pool_min_size: int = Field(1, alias="DB_POOL_MIN_SIZE")
    db_pool_max_size: int = Field(4, alias="DB_POOL_MAX_SIZE")
    db_connect_attempts: int = Field(3, alias="DB_CONNECT_ATTEMPTS")
    db_connect_timeout: float = Field(10.0, alias="DB_CONNECT_TIMEOUT")

    # Vault
    storage_backend: Literal["postgres", "memory"] = Field(
        "postgres", alias="VAULT_STORAGE_BACKEND"
    )
    backups_dir: Path = Field(Path("backups"), alias="VAULT_BACKUPS_DIR")
    export_path: Path = Field(Path("export.txt"), alias="VAULT_EXPORT_PATH")
    strict_backups: bool = Field(False, alias="VAULT_STRICT_BACKUPS")

    # Application
    app_env: str = Field("development", alias="APP_ENV")
    log_level: str = Field("WARNING", alias="LOG_LEVEL")
    log_json: bool = Field(False, alias="LOG_JSON")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Retrieve a cached instance of Settings to avoid repeated env parsing.
    """
    return Settings()


__all__ = ["Settings", "get_settings"]
