"""Run configuration model using pydantic-settings."""

from __future__ import annotations

import re
from typing import Any

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Options forwarded to every transcription client.
DEFAULT_CLIENT_OPTIONS: dict[str, Any] = {
    "model": "medium",
    "translate": False,
    "use_vad": False,
    "log_transcription": False,
}


class Config(BaseSettings):
    """Stress-test configuration loaded from WHISPER_STRESS_* variables and .env file."""

    model_config = SettingsConfigDict(
        env_prefix="WHISPER_STRESS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    client_count: int = 10
    audio_file: str = "german_sample_16k.wav"
    session_timeout_seconds: float = 180.0
    global_timeout_seconds: float = 210.0
    client_factory: str | None = None
    client_options: dict[str, Any] = Field(default_factory=lambda: dict(DEFAULT_CLIENT_OPTIONS))
    connect_attempts: int = 1
    log_level: str = "INFO"

    @field_validator("client_count")
    @classmethod
    def validate_client_count(cls, value: int) -> int:
        """Client count must be non-negative."""
        if value < 0:
            msg = "client_count must be >= 0"
            raise ValueError(msg)
        return value

    @field_validator("audio_file")
    @classmethod
    def validate_audio_file(cls, value: str) -> str:
        """Audio file path must be non-empty."""
        if not value.strip():
            msg = "audio_file must not be empty"
            raise ValueError(msg)
        return value

    @field_validator("session_timeout_seconds", "global_timeout_seconds")
    @classmethod
    def validate_timeout(cls, value: float) -> float:
        """Timeouts must be positive."""
        if value <= 0:
            msg = "timeouts must be > 0 seconds"
            raise ValueError(msg)
        return value

    @field_validator("client_factory")
    @classmethod
    def validate_client_factory(cls, value: str | None) -> str | None:
        """Client factory must look like 'package.module:attribute'."""
        if value is None:
            return value
        if not re.fullmatch(r"[A-Za-z_][\w.]*:[A-Za-z_][\w.]*", value):
            msg = "client_factory must match 'package.module:attribute'"
            raise ValueError(msg)
        return value

    @field_validator("connect_attempts")
    @classmethod
    def validate_connect_attempts(cls, value: int) -> int:
        """Connect attempts must be between 1 and 5."""
        if value < 1 or value > 5:
            msg = "connect_attempts must be between 1 and 5"
            raise ValueError(msg)
        return value

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Log level must be a valid Python logging level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in valid_levels:
            msg = f"log_level must be one of {', '.join(sorted(valid_levels))}"
            raise ValueError(msg)
        return upper_value

    @model_validator(mode="after")
    def validate_deadlines(self) -> Config:
        # Session deadlines must fire before the batch deadline.
        if self.global_timeout_seconds <= self.session_timeout_seconds:
            msg = "global_timeout_seconds must be greater than session_timeout_seconds"
            raise ValueError(msg)
        return self
