"""Pydantic data models for the transcription stress-test harness."""

from whisper_stress.models.batch_result import BatchResult
from whisper_stress.models.config import DEFAULT_CLIENT_OPTIONS, Config
from whisper_stress.models.session_outcome import SessionOutcome

__all__ = [
    "DEFAULT_CLIENT_OPTIONS",
    "BatchResult",
    "Config",
    "SessionOutcome",
]
