"""Tests for configuration management."""

from unittest.mock import patch

import pytest

from morning_brief.config import Config, ConfigError, load_config, load_cron_secret


ALL_KEYS = [
    "CRON_SECRET", "GOOGLE_API_KEY", "GEMINI_MODEL", "GEMINI_BASE_URL",
    "KV_REST_API_URL", "KV_REST_API_TOKEN", "ITEMS_PER_FEED",
    "REQUEST_TIMEOUT", "LOG_LEVEL",
]


@pytest.fixture
def clean_env(monkeypatch):
    """Clear all config env vars and keep .env files out of the way."""
    for key in ALL_KEYS:
        monkeypatch.delenv(key, raising=False)
    with patch("morning_brief.config.load_dotenv"):
        yield monkeypatch


class TestLoadConfig:
    """Tests for load_config function."""

    def test_load_config_success(self, clean_env):
        """Test successful config loading with all vars set."""
        clean_env.setenv("CRON_SECRET", "s3cret")
        clean_env.setenv("GOOGLE_API_KEY", "g-key")
        clean_env.setenv("GEMINI_MODEL", "gemini-2.0-flash")
        clean_env.setenv("KV_REST_API_URL", "https://kv.example.com")
        clean_env.setenv("KV_REST_API_TOKEN", "kv-token")
        clean_env.setenv("ITEMS_PER_FEED", "3")

        config = load_config()

        assert config.cron_secret == "s3cret"
        assert config.google_api_key == "g-key"
        assert config.gemini_model == "gemini-2.0-flash"
        assert config.kv_rest_api_url == "https://kv.example.com"
        assert config.kv_rest_api_token == "kv-token"
        assert config.items_per_feed == 3

    def test_load_config_uses_defaults(self, clean_env):
        """Test that missing values fall back to defaults instead of failing."""
        config = load_config()

        assert config.cron_secret is None
        assert config.google_api_key is None
        assert config.gemini_model == "gemini-1.5-flash"
        assert config.items_per_feed == 5
        assert config.request_timeout == 30
        assert not hasattr(config, "kv_key")

    def test_load_config_invalid_items_per_feed(self, clean_env):
        """Test that a non-integer ITEMS_PER_FEED raises ConfigError."""
        clean_env.setenv("ITEMS_PER_FEED", "five")

        with pytest.raises(ConfigError) as exc_info:
            load_config()

        assert "ITEMS_PER_FEED" in str(exc_info.value)

    def test_load_config_rejects_zero_items(self, clean_env):
        """Test that ITEMS_PER_FEED must be positive."""
        clean_env.setenv("ITEMS_PER_FEED", "0")

        with pytest.raises(ConfigError):
            load_config()

    def test_load_config_reads_env_path(self, clean_env, tmp_path):
        """Test that an explicit .env path is passed to dotenv."""
        env_file = tmp_path / ".env"

        with patch("morning_brief.config.load_dotenv") as mock_load:
            load_config(env_file)

        mock_load.assert_called_once_with(env_file)


class TestLoadCronSecret:
    """Tests for load_cron_secret."""

    def test_reads_secret(self, clean_env):
        clean_env.setenv("CRON_SECRET", "s3cret")
        assert load_cron_secret() == "s3cret"

    def test_unset_secret(self, clean_env):
        assert load_cron_secret() is None

    def test_ignores_invalid_settings(self, clean_env):
        """Test that bad numeric settings do not stop the secret from loading."""
        clean_env.setenv("CRON_SECRET", "s3cret")
        clean_env.setenv("ITEMS_PER_FEED", "five")
        clean_env.setenv("REQUEST_TIMEOUT", "soon")

        assert load_cron_secret() == "s3cret"


class TestRequireSecrets:
    """Tests for the secret accessors."""

    @pytest.mark.parametrize("api_key", [None, "", "   "])
    def test_require_api_key_missing(self, api_key):
        """Test that a blank API key raises ConfigError."""
        config = Config(google_api_key=api_key)

        with pytest.raises(ConfigError) as exc_info:
            config.require_api_key()

        assert str(exc_info.value) == "GOOGLE_API_KEY is not configured"

    def test_require_api_key_present(self):
        config = Config(google_api_key="g-key")
        assert config.require_api_key() == "g-key"

    def test_require_kv_missing_token(self):
        """Test that the store needs both URL and token."""
        config = Config(kv_rest_api_url="https://kv.example.com")

        with pytest.raises(ConfigError):
            config.require_kv()

    def test_require_kv_present(self):
        config = Config(kv_rest_api_url="https://kv.example.com", kv_rest_api_token="t")
        assert config.require_kv() == ("https://kv.example.com", "t")
