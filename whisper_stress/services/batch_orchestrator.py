"""Concurrent batch orchestration with a global deadline."""

from __future__ import annotations

import queue
import threading
import time
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from whisper_stress.core.errors import BatchTimeoutError
from whisper_stress.models.batch_result import BatchResult
from whisper_stress.models.session_outcome import SessionOutcome
from whisper_stress.services.session_runner import describe_error
from whisper_stress.utils.logger import get_logger
from whisper_stress.utils.progress import ProgressTracker

if TYPE_CHECKING:
    from collections.abc import Callable

    from whisper_stress.services.session_runner import SessionRunner

logger = get_logger(__name__)


class SessionThread(threading.Thread):
    """Daemon thread running one client's session.

    Keeps the outcome it produced and hands it to ``on_settled`` as soon as
    the session settles. Being a daemon, a session that never returns cannot
    hold the process open once the batch has given up on it.
    """

    def __init__(
        self,
        runner: SessionRunner,
        client_id: int,
        on_settled: Callable[[SessionOutcome], None],
    ) -> None:
        super().__init__(name=f"stress-client-{client_id}", daemon=True)
        self.runner = runner
        self.client_id = client_id
        self.on_settled = on_settled
        self.outcome: SessionOutcome | None = None

    def run(self) -> None:
        try:
            outcome = self.runner.run(self.client_id)
        except Exception as exc:
            outcome = crashed_outcome(self.client_id, exc)
        self.outcome = outcome
        self.on_settled(outcome)


class BatchOrchestrator:
    """Launches every session at once and bounds the whole batch by a deadline.

    Outcomes reach the orchestrator two ways. The normal path reads the full
    set straight from the joined session threads. Every outcome is also pushed
    into a side-channel queue as soon as its session settles, and that queue
    is the only source of results when the global deadline interrupts the run.
    """

    def __init__(self, runner: SessionRunner, global_timeout_seconds: float = 210.0) -> None:
        self.runner = runner
        self.global_timeout_seconds = global_timeout_seconds

    def run_batch(self, client_count: int) -> BatchResult:
        """Run ``client_count`` sessions concurrently.

        Returns all outcomes ordered by client ID. Raises BatchTimeoutError,
        carrying the outcomes settled so far, if the global deadline fires
        first. Sessions still running at that point are left behind on their
        daemon threads.
        """
        started = time.monotonic()
        if client_count <= 0:
            logger.info("batch_empty", client_count=client_count)
            return BatchResult(client_count=0, total_time_ms=_elapsed_ms(started))

        tracker = ProgressTracker(total=client_count)
        channel: queue.Queue[SessionOutcome] = queue.Queue()

        def publish(outcome: SessionOutcome) -> None:
            channel.put(outcome)
            if outcome.succeeded:
                tracker.record_success()
            else:
                tracker.record_failure()
            tracker.log_progress()

        logger.info(
            "batch_launching",
            client_count=client_count,
            global_timeout_seconds=self.global_timeout_seconds,
        )

        # One thread per client: no staggering, no admission control.
        sessions = [
            SessionThread(self.runner, client_id, publish)
            for client_id in range(1, client_count + 1)
        ]
        for session in sessions:
            session.start()

        deadline = started + self.global_timeout_seconds
        for session in sessions:
            session.join(timeout=max(0.0, deadline - time.monotonic()))

        total_time_ms = _elapsed_ms(started)

        if any(session.is_alive() for session in sessions):
            partial = _drain(channel)
            pending = client_count - len(partial)
            logger.error(
                "batch_timed_out",
                global_timeout_seconds=self.global_timeout_seconds,
                pending=pending,
                total_time_ms=total_time_ms,
                **tracker.summary(),
            )
            result = BatchResult(
                client_count=client_count,
                outcomes=partial,
                total_time_ms=total_time_ms,
                interrupted=True,
                interruption_reason=(
                    f"global deadline of {self.global_timeout_seconds:g}s exceeded "
                    f"with {pending} sessions pending"
                ),
            )
            raise BatchTimeoutError(self.global_timeout_seconds, result)

        result = BatchResult(
            client_count=client_count,
            outcomes=[session.outcome for session in sessions if session.outcome is not None],
            total_time_ms=total_time_ms,
        )
        logger.info(
            "batch_completed",
            client_count=client_count,
            successful=len(result.successful),
            failed=len(result.failed),
            total_time_ms=total_time_ms,
        )
        return result


def crashed_outcome(client_id: int, error: Exception) -> SessionOutcome:
    """Failed outcome for a session whose runner raised.

    SessionRunner.run never raises, but a failure escaping it is still
    recorded as a failed outcome rather than aborting the batch.
    """
    logger.error("session_crashed", client_id=client_id, error=describe_error(error))
    now = datetime.now(UTC)
    return SessionOutcome.start(client_id, started_at=now).fail(now, 0, describe_error(error))


def _drain(channel: queue.Queue[SessionOutcome]) -> list[SessionOutcome]:
    outcomes: list[SessionOutcome] = []
    while True:
        try:
            outcomes.append(channel.get_nowait())
        except queue.Empty:
            return outcomes


def _elapsed_ms(started: float) -> int:
    return int((time.monotonic() - started) * 1000)
