"""Outcome builders shared by the test modules."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from whisper_stress.models.session_outcome import SessionOutcome

PAST_DATETIME = datetime(2024, 1, 15, 12, 0, 0, tzinfo=UTC)


def make_success(client_id: int, duration_ms: int) -> SessionOutcome:
    """Build a completed successful outcome."""
    ended_at = PAST_DATETIME + timedelta(milliseconds=duration_ms)
    return SessionOutcome.start(client_id, started_at=PAST_DATETIME).succeed(ended_at, duration_ms)


def make_failure(client_id: int, error_message: str, duration_ms: int = 10) -> SessionOutcome:
    """Build a completed failed outcome."""
    ended_at = PAST_DATETIME + timedelta(milliseconds=duration_ms)
    return SessionOutcome.start(client_id, started_at=PAST_DATETIME).fail(
        ended_at, duration_ms, error_message
    )
