"""
Configuration management for the morning brief job.

Loads settings from environment variables / .env file and provides
typed accessors with validation. Secrets are read at invocation time
and may be absent: the caller decides how to fail.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv


class ConfigError(Exception):
    """Raised when configuration is invalid or missing required values."""
    pass


@dataclass
class Config:
    """Application configuration container."""

    # Shared secret for the cron trigger
    cron_secret: Optional[str] = None

    # Gemini settings
    google_api_key: Optional[str] = None
    gemini_model: str = "gemini-1.5-flash"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"

    # Vercel KV (Upstash REST) settings
    kv_rest_api_url: Optional[str] = None
    kv_rest_api_token: Optional[str] = None

    items_per_feed: int = 5
    request_timeout: int = 30
    log_level: str = "INFO"

    def require_api_key(self) -> str:
        """Return the Gemini API key or raise ConfigError if it is blank."""
        if not self.google_api_key or not self.google_api_key.strip():
            raise ConfigError("GOOGLE_API_KEY is not configured")
        return self.google_api_key

    def require_kv(self) -> tuple[str, str]:
        """Return (url, token) for the KV store or raise ConfigError."""
        if not self.kv_rest_api_url or not self.kv_rest_api_token:
            raise ConfigError("KV_REST_API_URL and KV_REST_API_TOKEN must be configured")
        return self.kv_rest_api_url, self.kv_rest_api_token


def _get_optional_env(key: str, default: Optional[str] = None) -> Optional[str]:
    """Get an optional environment variable with a default."""
    return os.environ.get(key, default)


def _get_int_env(key: str, default: int) -> int:
    """Get an integer environment variable or raise ConfigError."""
    value = os.environ.get(key)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigError(f"{key} must be an integer, got: {value}")


def _load_env_file(env_path: Optional[Path] = None) -> None:
    if env_path:
        load_dotenv(env_path)
    else:
        load_dotenv()


def load_cron_secret(env_path: Optional[Path] = None) -> Optional[str]:
    """
    Read only the cron secret.

    Never raises, so the secret check can run before the rest of the
    configuration is validated.
    """
    _load_env_file(env_path)
    return _get_optional_env("CRON_SECRET")


def load_config(env_path: Optional[Path] = None) -> Config:
    """
    Load configuration from environment variables.

    Args:
        env_path: Optional path to .env file. If not provided,
                  searches for .env in current and parent directories.

    Returns:
        Config object with all settings populated.

    Raises:
        ConfigError: If a numeric setting is not an integer.
    """
    _load_env_file(env_path)

    items_per_feed = _get_int_env("ITEMS_PER_FEED", 5)
    if items_per_feed < 1:
        raise ConfigError(f"ITEMS_PER_FEED must be positive, got: {items_per_feed}")

    return Config(
        cron_secret=_get_optional_env("CRON_SECRET"),
        google_api_key=_get_optional_env("GOOGLE_API_KEY"),
        gemini_model=_get_optional_env("GEMINI_MODEL", "gemini-1.5-flash"),
        gemini_base_url=_get_optional_env(
            "GEMINI_BASE_URL",
            "https://generativelanguage.googleapis.com/v1beta"
        ),
        kv_rest_api_url=_get_optional_env("KV_REST_API_URL"),
        kv_rest_api_token=_get_optional_env("KV_REST_API_TOKEN"),
        items_per_feed=items_per_feed,
        request_timeout=_get_int_env("REQUEST_TIMEOUT", 30),
        log_level=_get_optional_env("LOG_LEVEL", "INFO"),
    )
