"""Application configuration."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_PROJECT_DIR = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    """Runtime settings loaded from environment variables."""

    app_name: str = "Union Paginator Demo API"
    database_url: str = f"sqlite+pysqlite:///{_PROJECT_DIR / 'union_paginator.db'}"
    sql_echo: bool = False
    default_per_page: int = 15
    max_per_page: int = 100
    page_name: str = "page"

    model_config = SettingsConfigDict(
        env_prefix="UNION_PAGINATOR_",
        env_file=str(_PROJECT_DIR / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""

    return Settings()
