"""
Tests for SDK settings
"""
import logging

import pytest
from pydantic import ValidationError

from tap_sdk import config
from tap_sdk.config import TapSettings, configure, get_settings, reset_settings


class TestTapSettings:
    """Tests for settings defaults and validation."""

    def test_defaults(self, monkeypatch):
        """Should use the documented defaults."""
        for name in ("TAP_API_KEY", "TAP_API_BASE", "TAP_MAX_NETWORK_RETRIES", "TAP_LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)

        settings = TapSettings(_env_file=None)

        assert settings.api_key is None
        assert settings.api_base == "https://api.tap.company"
        assert settings.open_timeout == 30.0
        assert settings.read_timeout == 80.0
        assert settings.max_network_retries == 0
        assert settings.initial_network_retry_delay == 0.5
        assert settings.max_network_retry_delay == 2.0
        assert settings.log_level is None

    def test_environment(self, monkeypatch):
        """Should read TAP_ prefixed environment variables."""
        monkeypatch.setenv("TAP_API_KEY", "sk_test_env")
        monkeypatch.setenv("TAP_MAX_NETWORK_RETRIES", "3")
        monkeypatch.setenv("TAP_LOG_LEVEL", "INFO")

        settings = TapSettings(_env_file=None)

        assert settings.api_key == "sk_test_env"
        assert settings.max_network_retries == 3
        assert settings.log_level == "info"

    def test_strip_trailing_slash(self):
        """Should strip the trailing slash from the API base."""
        assert TapSettings(api_base="https://api.example.com/", _env_file=None).api_base == (
            "https://api.example.com"
        )

    def test_reject_negative_retries(self):
        """Should reject a negative retry count."""
        with pytest.raises(ValidationError):
            TapSettings(max_network_retries=-1, _env_file=None)

    def test_reject_unknown_log_level(self):
        """Should reject levels other than debug, info and error."""
        with pytest.raises(ValidationError):
            TapSettings(log_level="verbose", _env_file=None)


class TestConfigure:
    """Tests for the process-wide settings."""

    def test_configure_updates(self, tap_settings):
        """Should replace the active settings with the changes applied."""
        updated = configure(max_network_retries=2)

        assert get_settings() is updated
        assert updated.max_network_retries == 2
        assert updated.api_key == tap_settings.api_key

    def test_configure_keeps_logger(self):
        """Should carry the logger across changes."""
        custom = logging.getLogger("tests.custom")
        configure(logger=custom)

        configure(log_level="error")

        assert get_settings().logger is custom

    def test_configure_validates(self):
        """Should validate the changes."""
        with pytest.raises(ValidationError):
            configure(read_timeout=0)

    def test_reset_reloads(self, monkeypatch):
        """Should reload from the environment after a reset."""
        monkeypatch.setenv("TAP_API_KEY", "sk_test_reloaded")

        reset_settings()

        assert config._settings is None
        assert get_settings().api_key == "sk_test_reloaded"
