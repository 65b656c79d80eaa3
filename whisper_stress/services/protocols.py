"""Service protocols defining interfaces for dependency injection."""

from __future__ import annotations

from typing import Any, Protocol


class TranscriptionClientProtocol(Protocol):
    """Protocol for streaming transcription clients driven by the harness.

    ``connect`` and ``process_audio_file`` block until done or raise.
    ``disconnect`` is best-effort and must not block.
    """

    def connect(self) -> None: ...

    def process_audio_file(self, path: str) -> Any: ...

    def disconnect(self) -> None: ...


class ClientFactoryProtocol(Protocol):
    """Callable that builds a fresh, unconnected transcription client."""

    def __call__(self) -> TranscriptionClientProtocol: ...
