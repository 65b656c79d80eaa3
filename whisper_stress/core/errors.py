"""Exception hierarchy for the stress-test harness."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from whisper_stress.models.batch_result import BatchResult


class StressTestError(Exception):
    """Base class for harness-level failures."""


class SessionTimeoutError(StressTestError, TimeoutError):
    """Raised when a single session exceeds its deadline.

    Never escapes the session runner; it is recorded on the outcome.
    """

    def __init__(self, client_id: int, timeout_seconds: float) -> None:
        self.client_id = client_id
        self.timeout_seconds = timeout_seconds
        super().__init__(
            f"Client {client_id} timed out after {_format_seconds(timeout_seconds)} seconds"
        )


class BatchTimeoutError(StressTestError):
    """Raised when the whole batch exceeds the global deadline.

    Carries the outcomes that had settled before the deadline so the caller
    can still report a truncated run.
    """

    def __init__(self, timeout_seconds: float, partial: BatchResult) -> None:
        self.timeout_seconds = timeout_seconds
        self.partial = partial
        super().__init__(
            f"Entire stress test timed out after {_format_seconds(timeout_seconds)} seconds"
        )


class PreconditionError(StressTestError):
    """Raised before launch when the run cannot start (e.g. missing audio file)."""


class ClientFactoryError(PreconditionError):
    """Raised when the configured transcription client factory cannot be loaded."""


def _format_seconds(seconds: float) -> str:
    return f"{seconds:g}"
