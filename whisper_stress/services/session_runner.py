"""Single client session runner with a per-session deadline."""

from __future__ import annotations

import queue
import threading
import time
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from whisper_stress.core.errors import SessionTimeoutError, StressTestError
from whisper_stress.models.session_outcome import SessionOutcome
from whisper_stress.utils.logger import get_logger
from whisper_stress.utils.retry import retry_with_logging

if TYPE_CHECKING:
    from whisper_stress.services.protocols import (
        ClientFactoryProtocol,
        TranscriptionClientProtocol,
    )

logger = get_logger(__name__)

# How long a timed-out session waits for its best-effort disconnect.
ABANDON_DISCONNECT_WAIT_SECONDS = 1.0


def describe_error(error: object) -> str:
    """Turn a failure into the text stored on the outcome."""
    if isinstance(error, BaseException):
        return str(error) or type(error).__name__
    return str(error)


class SessionRunner:
    """Runs one client's connect -> process -> disconnect lifecycle.

    The client is created and driven on a daemon thread that is raced against
    the session deadline. Whichever settles first decides the outcome. A
    session that loses the race is abandoned: the runner asks the client to
    disconnect once, waits briefly for that, and stops waiting. The worker
    thread may keep running in the background.
    """

    def __init__(
        self,
        client_factory: ClientFactoryProtocol,
        audio_file: str,
        session_timeout_seconds: float = 180.0,
        connect_attempts: int = 1,
        connect_retry_min_wait: float = 2.0,
        connect_retry_max_wait: float = 10.0,
    ) -> None:
        self.client_factory = client_factory
        self.audio_file = audio_file
        self.session_timeout_seconds = session_timeout_seconds
        self.connect_attempts = connect_attempts
        self.connect_retry_min_wait = connect_retry_min_wait
        self.connect_retry_max_wait = connect_retry_max_wait

    def run(self, client_id: int) -> SessionOutcome:
        """Run a session to completion and return its outcome. Never raises."""
        outcome = SessionOutcome.start(client_id)
        started = time.monotonic()
        logger.info("session_started", client_id=client_id)

        try:
            self._run_with_deadline(client_id)
        except Exception as exc:
            duration_ms = _elapsed_ms(started)
            error_message = describe_error(exc)
            logger.error(
                "session_failed",
                client_id=client_id,
                duration_ms=duration_ms,
                error_type=type(exc).__name__,
                error=error_message,
            )
            return outcome.fail(datetime.now(UTC), duration_ms, error_message)

        duration_ms = _elapsed_ms(started)
        logger.info("session_completed", client_id=client_id, duration_ms=duration_ms)
        return outcome.succeed(datetime.now(UTC), duration_ms)

    def _run_with_deadline(self, client_id: int) -> None:
        settled: queue.Queue[BaseException | None] = queue.Queue(maxsize=1)
        clients: list[TranscriptionClientProtocol] = []

        def lifecycle() -> None:
            try:
                client = self.client_factory()
                clients.append(client)
                self._lifecycle(client_id, client)
            except BaseException as exc:
                settled.put(exc)
            else:
                settled.put(None)

        worker = threading.Thread(target=lifecycle, name=f"session-{client_id}", daemon=True)
        worker.start()

        try:
            error = settled.get(timeout=self.session_timeout_seconds)
        except queue.Empty:
            if clients:
                self._abandon(client_id, clients[0])
            raise SessionTimeoutError(client_id, self.session_timeout_seconds) from None

        if error is None:
            return
        if not isinstance(error, Exception):
            raise StressTestError(describe_error(error)) from error
        raise error

    def _lifecycle(self, client_id: int, client: TranscriptionClientProtocol) -> None:
        connect = client.connect
        if self.connect_attempts > 1:
            connect = retry_with_logging(
                max_attempts=self.connect_attempts,
                min_wait=self.connect_retry_min_wait,
                max_wait=self.connect_retry_max_wait,
            )(client.connect)

        connect()
        logger.info("session_connected", client_id=client_id)

        client.process_audio_file(self.audio_file)
        client.disconnect()

    def _abandon(self, client_id: int, client: TranscriptionClientProtocol) -> None:
        """Best-effort release of a timed-out client's connection.

        The disconnect runs on its own daemon thread so a client that blocks
        in ``disconnect()`` cannot stall the session past the bounded wait.
        """

        def disconnect() -> None:
            try:
                client.disconnect()
            except Exception as exc:
                logger.warning(
                    "session_disconnect_failed",
                    client_id=client_id,
                    error=describe_error(exc),
                )

        releaser = threading.Thread(
            target=disconnect, name=f"session-{client_id}-abandon", daemon=True
        )
        releaser.start()
        releaser.join(timeout=ABANDON_DISCONNECT_WAIT_SECONDS)
        if releaser.is_alive():
            logger.warning(
                "session_disconnect_stalled",
                client_id=client_id,
                waited_seconds=ABANDON_DISCONNECT_WAIT_SECONDS,
            )


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)
