"""Tests for the configuration module."""

from __future__ import annotations

import os
from unittest.mock import patch

from taskflow.core.config import Settings


class TestSettings:
    """Test suite for application Settings."""

    def test_default_values(self) -> None:
        """Settings should match the documented defaults."""
        with patch.dict(os.environ, {}, clear=True):
            settings = Settings(
                _env_file=None,  # type: ignore[call-arg]
            )
        assert settings.app_name == "TaskFlow"
        assert settings.redis_addr == "localhost:6379"
        assert settings.api_port == 8080
        assert settings.worker_port == 8081
        assert settings.cors_origins == ["*"]

    def test_redis_url_built_from_address(self) -> None:
        """redis_url should be derived from redis_addr when not set."""
        settings = Settings(
            redis_addr="cache-host:6380",
            redis_url=None,
            _env_file=None,  # type: ignore[call-arg]
        )
        assert settings.redis_url == "redis://cache-host:6380/0"

    def test_explicit_redis_url_not_overwritten(self) -> None:
        settings = Settings(
            redis_url="redis://explicit:6379/3",
            _env_file=None,  # type: ignore[call-arg]
        )
        assert settings.redis_url == "redis://explicit:6379/3"

    def test_values_read_from_environment(self) -> None:
        env = {"REDIS_ADDR": "redis:6379", "API_PORT": "9000", "WORKER_PORT": "9001"}
        with patch.dict(os.environ, env, clear=True):
            settings = Settings(
                _env_file=None,  # type: ignore[call-arg]
            )
        assert settings.redis_url == "redis://redis:6379/0"
        assert settings.api_port == 9000
        assert settings.worker_port == 9001

    def test_cors_origins_from_json_string(self) -> None:
        settings = Settings(
            cors_origins='["http://a.example", "http://b.example"]',  # type: ignore[arg-type]
            _env_file=None,  # type: ignore[call-arg]
        )
        assert settings.cors_origins == ["http://a.example", "http://b.example"]

    def test_cors_origins_from_comma_separated(self) -> None:
        settings = Settings(
            cors_origins="http://a.example, http://b.example",  # type: ignore[arg-type]
            _env_file=None,  # type: ignore[call-arg]
        )
        assert settings.cors_origins == ["http://a.example", "http://b.example"]

    def test_cors_origins_from_environment(self) -> None:
        env = {"CORS_ORIGINS": "http://a.example,http://b.example"}
        with patch.dict(os.environ, env, clear=True):
            settings = Settings(
                _env_file=None,  # type: ignore[call-arg]
            )
        assert settings.cors_origins == ["http://a.example", "http://b.example"]
