"""Configuration models for MixerDeck.

This module contains all configuration-related Pydantic models used throughout the application.
"""

from pydantic import BaseModel, Field, field_validator


class LoggingConfig(BaseModel):
    """Structlog-based logging configuration."""

    level: str = "INFO"
    json_logs: bool | None = None  # None = auto-detect based on environment
    include_caller: bool = False  # Include file:line info (useful for debugging)
    extra_fields: dict[str, str] = Field(default_factory=lambda: {"service": "mixerdeck"})


class MixerDeckConfig(BaseModel):
    """Configuration settings for the MixerDeck application."""

    # Version tracking
    config_version: str = "1.0.0"

    # External tools (empty = resolve next to the app directory)
    svcl_path: str = ""
    getnir_path: str = ""
    command_timeout: float = 10.0  # Seconds before an external command is killed

    # Client synchronization
    debounce_seconds: float = 0.1  # Quiet window for volume slider writes
    application_refresh_interval: float = 30.0  # Seconds between application list refreshes
    default_device: str = "Speakers"  # Device addressed when a request names none
    api_base_url: str = "http://127.0.0.1:8000"  # Server followed by `mixerdeck watch`

    # Logging settings
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("command_timeout", "debounce_seconds", "application_refresh_interval")
    @classmethod
    def validate_positive(cls, v: float) -> float:
        """Reject zero or negative intervals."""
        if v <= 0:
            raise ValueError(f"Interval must be positive, got {v}")
        return v
