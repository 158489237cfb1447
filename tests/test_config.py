"""Unit tests for configuration loading."""
import json

import pytest
import pytz
from pydantic import ValidationError

from circles.config import Settings, flatten_json_config, load_json_config
from circles.models import Locale


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove config env vars that would leak into tests."""
    for name in ("CONFIG_FILE", "REDIS_HOST", "REDIS_PORT", "DEFAULT_LOCALE", "EVENT_TIMEZONE"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def config_file(tmp_path, monkeypatch):
    """Write a JSON config file and point CONFIG_FILE at it."""
    path = tmp_path / "config.json"
    path.write_text(json.dumps({
        "_comment": "local overrides",
        "redis": {"redis_host": "cache.local", "redis_port": 6380},
        "display": {"default_locale": "fr", "event_timezone": "Europe/Paris"},
    }))
    monkeypatch.setenv("CONFIG_FILE", str(path))
    return path


class TestJsonConfig:
    """Test JSON config helpers."""

    def test_flatten_skips_comments(self):
        """Test nested sections flatten and underscore keys are dropped."""
        flat = flatten_json_config({"_comment": "x", "a": {"b": 1, "c": {"d": 2}}, "e": 3})
        assert flat == {"b": 1, "d": 2, "e": 3}

    def test_missing_file(self, tmp_path):
        """Test a missing file yields no values."""
        assert load_json_config(str(tmp_path / "absent.json")) == {}

    def test_invalid_json(self, tmp_path):
        """Test an unreadable file yields no values."""
        path = tmp_path / "broken.json"
        path.write_text("{nope")
        assert load_json_config(str(path)) == {}


class TestSettings:
    """Test Settings resolution."""

    def test_defaults(self):
        """Test default values."""
        settings = Settings()

        assert settings.redis_host == "redis"
        assert settings.redis_port == 6379
        assert settings.default_locale is Locale.EN
        assert settings.tz == pytz.timezone("America/Toronto")
        assert settings.redis_address == "redis:6379"

    def test_only_service_settings(self):
        """Test settings carry connection and display values only."""
        assert set(Settings.model_fields) == {
            "redis_host",
            "redis_port",
            "redis_password",
            "redis_db",
            "server_port",
            "log_level",
            "default_locale",
            "event_timezone",
        }
        assert not hasattr(Settings(), "base_dir")

    def test_json_config_applied(self, config_file):
        """Test values from the JSON config file."""
        settings = Settings()

        assert settings.redis_host == "cache.local"
        assert settings.redis_port == 6380
        assert settings.default_locale is Locale.FR
        assert settings.event_timezone == "Europe/Paris"

    def test_env_overrides_json(self, config_file, monkeypatch):
        """Test environment variables win over the JSON file."""
        monkeypatch.setenv("REDIS_PORT", "7000")

        settings = Settings()

        assert settings.redis_port == 7000
        assert settings.redis_host == "cache.local"

    def test_unknown_timezone_rejected(self):
        """Test an invalid time zone fails at startup."""
        with pytest.raises(ValidationError):
            Settings(event_timezone="Mars/Olympus_Mons")
