"""Application configuration loaded from environment variables and .env file."""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_REEL_DIR = Path(__file__).resolve().parent.parent / "integrations" / "mock" / "fixtures" / "reels"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Global mode
    console_mode: str = Field(default="mock", description="Global mode: 'mock' or 'live'")

    # Mock settings
    mock_scenario: str = Field(default="reverse_shell")
    mock_delay_enabled: bool = Field(default=True)

    # Console API
    api_mode: str = Field(default="")
    api_base_url: str = Field(default="http://localhost:8080")
    api_timeout_seconds: float = Field(default=10.0, gt=0)

    # Replay
    replay_interval_ms: int = Field(default=1500, gt=0)
    replay_reel: str = Field(default="reverse_shell")
    replay_reel_dir: Path = Field(default=DEFAULT_REEL_DIR)

    # Logging
    log_level: str = Field(default="INFO")

    def get_integration_mode(self, integration: str) -> str:
        """Return the effective mode for a given integration.

        Per-integration overrides take precedence over the global console_mode.
        """
        override = getattr(self, f"{integration}_mode", "")
        return override if override else self.console_mode

    @property
    def available_scenarios(self) -> list[str]:
        return [
            "reverse_shell",
            "crypto_miner",
        ]


def get_settings() -> Settings:
    """Create and return the application settings singleton."""
    return Settings()


def configure_logging(settings: Settings) -> None:
    """Apply the configured log level to the root logger."""
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
