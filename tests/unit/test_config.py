"""Tests for application configuration."""

import logging

import pytest
from pydantic import ValidationError

from app.config import DEFAULT_REEL_DIR, Settings, configure_logging


class TestSettingsDefaults:
    def test_default_mode_is_mock(self):
        s = Settings(console_mode="mock")
        assert s.console_mode == "mock"

    def test_default_scenario(self):
        s = Settings()
        assert s.mock_scenario == "reverse_shell"

    def test_default_delay_enabled(self):
        s = Settings()
        assert s.mock_delay_enabled is True

    def test_default_replay_interval(self):
        s = Settings()
        assert s.replay_interval_ms == 1500
        assert s.replay_reel_dir == DEFAULT_REEL_DIR

    def test_available_scenarios(self):
        s = Settings()
        assert s.available_scenarios == ["reverse_shell", "crypto_miner"]


class TestValidation:
    @pytest.mark.parametrize("interval", [0, -100])
    def test_replay_interval_must_be_positive(self, interval):
        with pytest.raises(ValidationError):
            Settings(replay_interval_ms=interval)

    def test_timeout_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(api_timeout_seconds=0)

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("CONSOLE_MODE", "live")
        monkeypatch.setenv("REPLAY_INTERVAL_MS", "250")
        s = Settings()
        assert s.console_mode == "live"
        assert s.replay_interval_ms == 250


class TestIntegrationModeOverride:
    def test_global_mode_used_when_no_override(self):
        s = Settings(console_mode="mock", api_mode="")
        assert s.get_integration_mode("api") == "mock"

    def test_per_integration_override(self):
        s = Settings(console_mode="mock", api_mode="live")
        assert s.get_integration_mode("api") == "live"

    def test_global_live_mode(self):
        s = Settings(console_mode="live")
        assert s.get_integration_mode("api") == "live"

    def test_unknown_integration_falls_back_to_global(self):
        s = Settings(console_mode="mock")
        assert s.get_integration_mode("nonexistent") == "mock"


class TestConfigureLogging:
    def test_applies_level(self, monkeypatch):
        calls = {}
        monkeypatch.setattr(logging, "basicConfig", lambda **kw: calls.update(kw))
        configure_logging(Settings(log_level="debug"))
        assert calls["level"] == "DEBUG"
