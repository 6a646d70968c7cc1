"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Secrets (ANTHROPIC_API_KEY, DATABASE_URL) come from the environment or .env
    - get_settings() is cached (lru_cache) — single instance per process
    - Every non-secret setting has a default that works with docker-compose

Design Decisions:
    - CORS_ORIGINS accepts a comma-separated string as well as a JSON list,
      so it can be set from a plain env var
    - notebook_output_dir and public_base_url must agree: files written to the
      directory are served by main.py under {public_base_url}/notebooks
"""

import json
from functools import lru_cache
from typing import Annotated, Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", case_sensitive=False, extra="ignore",
    )

    # Database
    database_url: str = (
        "postgresql+asyncpg://mentorflow:mentorflow@db:5432/mentorflow"
    )
    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Anthropic
    anthropic_api_key: str = "sk-ant-placeholder"
    anthropic_max_retries: int = 3
    anthropic_timeout_seconds: int = 300
    anthropic_base_delay_ms: int = 1000
    anthropic_max_delay_ms: int = 60_000

    # Notebook artifacts
    notebook_model: str = "claude-sonnet-4-5"
    notebook_max_tokens: int = 16_000
    notebook_output_dir: str = "public/notebooks"
    public_base_url: str = "http://localhost:8000"

    # API
    cors_origins: Annotated[list[str], NoDecode] = ["http://localhost:3000"]

    # Observability
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "json"

    @field_validator("database_url", mode="before")
    @classmethod
    def use_asyncpg_driver(cls, v: str) -> str:
        """Hosted Postgres URLs (postgres://, postgresql://) need the asyncpg driver."""
        if not isinstance(v, str):
            return v
        for prefix in ("postgres://", "postgresql://"):
            if v.startswith(prefix):
                return "postgresql+asyncpg://" + v[len(prefix):]
        return v

    @field_validator("cors_origins", mode="before")
    @classmethod
    def split_origins(cls, v):
        if isinstance(v, str):
            v = v.strip()
            if v.startswith("["):
                return json.loads(v)
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("public_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


@lru_cache
def get_settings() -> Settings:
    return Settings()
