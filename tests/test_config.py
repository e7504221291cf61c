"""
Tests for configuration.

Requires Python 3.11+.
"""

import pytest
from pydantic import ValidationError

from watchrun import __version__
from watchrun.utils.config import Settings, get_settings, split_extensions


class TestSplitExtensions:
    """Test cases for extension list parsing."""

    def test_normalizes_dots_and_blanks(self):
        """Test dot prefixing, whitespace trimming and blank removal."""
        assert split_extensions("go, .py,,txt ") == [".go", ".py", ".txt"]

    def test_accepts_lists(self):
        """Test that lists are normalized the same way."""
        assert split_extensions(["go", ".md"]) == [".go", ".md"]


class TestSettings:
    """Test cases for Settings."""

    def test_defaults(self):
        """Test default values."""
        settings = Settings()

        assert settings.path == "."
        assert settings.types == [".go"]
        assert settings.command == ""
        assert settings.poll_interval_ms == 0
        assert not settings.poll_mode
        assert settings.delay == 0.0
        assert settings.execution_mode == "concurrent"
        assert settings.logging.level == "INFO"
        assert settings.app_version == __version__

    def test_reads_environment(self, monkeypatch: pytest.MonkeyPatch):
        """Test that WATCHRUN_* variables are picked up."""
        monkeypatch.setenv("WATCHRUN_TYPES", "py, toml")
        monkeypatch.setenv("WATCHRUN_COMMAND", "make")
        monkeypatch.setenv("WATCHRUN_POLL_INTERVAL_MS", "250")
        monkeypatch.setenv("WATCHRUN_LOG_FORMAT", "json")

        settings = Settings()

        assert settings.types == [".py", ".toml"]
        assert settings.command == "make"
        assert settings.poll_mode
        assert settings.poll_interval == 0.25
        assert settings.logging.format == "json"

    def test_init_overrides_environment(self, monkeypatch: pytest.MonkeyPatch):
        """Test that explicit values win over the environment."""
        monkeypatch.setenv("WATCHRUN_COMMAND", "make")

        assert Settings(command="pytest").command == "pytest"

    def test_negative_durations_rejected(self):
        """Test that negative poll periods and delays are invalid."""
        with pytest.raises(ValidationError):
            Settings(poll_interval_ms=-1)
        with pytest.raises(ValidationError):
            Settings(delay_ms=-5)

    def test_unknown_execution_mode_rejected(self):
        """Test that only the known execution modes are accepted."""
        with pytest.raises(ValidationError):
            Settings(execution_mode="parallel")

    def test_settings_are_frozen(self):
        """Test that settings cannot be changed after construction."""
        settings = Settings(command="make")

        with pytest.raises(ValidationError):
            settings.command = "rm -rf /"

    def test_log_level_validated(self, monkeypatch: pytest.MonkeyPatch):
        """Test log level normalization and validation."""
        monkeypatch.setenv("WATCHRUN_LOG_LEVEL", "debug")
        assert Settings().logging.level == "DEBUG"

        monkeypatch.setenv("WATCHRUN_LOG_LEVEL", "loud")
        with pytest.raises(ValidationError):
            Settings()

    def test_get_settings_is_cached(self):
        """Test that get_settings returns a singleton."""
        get_settings.cache_clear()
        try:
            assert get_settings() is get_settings()
        finally:
            get_settings.cache_clear()
