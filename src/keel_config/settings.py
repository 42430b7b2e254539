"""Settings loaded from environment variables.

Configuration file discovery (in priority order):
1. OS environment variables (always highest priority)
2. KEEL_ENV_FILE environment variable (path to .env file)
3. config/.env.dev - local development
4. config/.env - production/Docker

Uses pydantic-settings for automatic type coercion and validation.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from keel_auth.timespan import is_valid_timespan


def _find_project_root() -> Path:
    """Find the project root directory."""
    current = Path(__file__).resolve().parent

    for parent in [current, *current.parents]:
        if (parent / "config").is_dir():
            return parent
        if (parent / "pyproject.toml").is_file():
            return parent

    return Path(__file__).resolve().parents[2]


def get_config_dir() -> Path:
    """Get the config directory path."""
    return _find_project_root() / "config"


def _resolve_env_file_path() -> Path | None:
    """Resolve the .env file path.

    Priority:
    1. KEEL_ENV_FILE env var (full path)
    2. config/.env.dev (local development)
    3. config/.env (production)
    """
    env_file_path = os.environ.get("KEEL_ENV_FILE")
    if env_file_path:
        path = Path(env_file_path)
        if not path.is_absolute():
            path = _find_project_root() / path
        if path.exists():
            return path

    config_dir = get_config_dir()

    dev_env = config_dir / ".env.dev"
    if dev_env.exists():
        return dev_env

    prod_env = config_dir / ".env"
    if prod_env.exists():
        return prod_env

    return None


class Settings(BaseSettings):
    """Configuration loaded from environment variables.

    Values are loaded from:
    1. OS environment variables (highest priority)
    2. .env file (config/.env.dev or config/.env)
    3. Default values
    """

    model_config = SettingsConfigDict(
        env_file=_resolve_env_file_path(),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Security (MUST be set - JWTManager refuses weak secrets)
    jwt_secret_key: SecretStr

    # JWT (JWT_ prefix)
    jwt_access_token_expiry: str = "15m"
    jwt_refresh_token_expiry: str = "7d"
    jwt_issuer: str | None = None
    jwt_audience: str | None = None

    # Logging (LOG_ prefix)
    log_level: str = "INFO"

    @field_validator("jwt_access_token_expiry", "jwt_refresh_token_expiry")
    @classmethod
    def _validate_expiry(cls, v: str) -> str:
        """Reject expiry values that are not positive time spans."""
        if not is_valid_timespan(v):
            msg = f"Invalid time span {v!r}. Use a format like '15m', '1h', '7d'"
            raise ValueError(msg)
        return v

    @field_validator("jwt_issuer", "jwt_audience", mode="before")
    @classmethod
    def _empty_to_none(cls, v: str | None) -> str | None:
        """Treat an empty environment value as unset."""
        return v or None


@lru_cache()
def get_settings() -> Settings:
    """Return cached settings.

    jwt_secret_key must be provided via environment variables or .env file.
    """
    return Settings()  # type: ignore[call-arg]  # pydantic-settings loads from env


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for tests)."""
    get_settings.cache_clear()
