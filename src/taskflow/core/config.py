"""Application configuration using Pydantic Settings v2.

Loads configuration from environment variables with .env file support.
Shared by the producer API and the consumer worker; each process reads
the port it binds from its own field.
"""

from __future__ import annotations

import functools
import json
from typing import Annotated, Any

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict


class Settings(BaseSettings):
    """TaskFlow settings.

    Configuration is loaded from environment variables.
    A .env file in the project root is also read if present.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── Application ──────────────────────────────────────────────
    app_name: str = "TaskFlow"
    app_env: str = "development"
    debug: bool = False
    log_level: str = "INFO"

    # ── Redis ────────────────────────────────────────────────────
    redis_addr: str = "localhost:6379"
    redis_url: str | None = None

    # ── HTTP ─────────────────────────────────────────────────────
    bind_host: str = "0.0.0.0"  # noqa: S104 - intentional for container deployments  # nosec B104
    api_port: int = 8080
    worker_port: int = 8081
    cors_origins: Annotated[list[str], NoDecode] = ["*"]

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: Any) -> list[str]:
        """Parse CORS origins from JSON string or list."""
        if isinstance(v, str):
            try:
                parsed = json.loads(v)
                if isinstance(parsed, list):
                    return [str(item) for item in parsed]
            except (json.JSONDecodeError, TypeError):
                return [origin.strip() for origin in v.split(",") if origin.strip()]
        if isinstance(v, list):
            return [str(item) for item in v]
        return ["*"]

    @model_validator(mode="after")
    def build_redis_url(self) -> Settings:
        """Build redis_url from the store address if not set."""
        if not self.redis_url:
            self.redis_url = f"redis://{self.redis_addr}/0"
        return self


@functools.lru_cache
def get_settings() -> Settings:
    """Return cached application settings instance."""
    return Settings()
