"""Progress tracking for concurrently running client sessions."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field

from whisper_stress.utils.logger import get_logger

logger = get_logger(__name__)


@dataclass
class ProgressTracker:
    """Track how many sessions of a batch have settled.

    Sessions settle on worker threads, so every update takes the lock.
    """

    total: int
    settled: int = 0
    successful: int = 0
    failed: int = 0
    start_time: float = field(default_factory=time.monotonic)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False, compare=False)

    def record_success(self) -> None:
        """Record a session that completed successfully."""
        with self._lock:
            self.settled += 1
            self.successful += 1

    def record_failure(self) -> None:
        """Record a session that failed or timed out."""
        with self._lock:
            self.settled += 1
            self.failed += 1

    @property
    def elapsed_seconds(self) -> float:
        """Time elapsed since start."""
        return time.monotonic() - self.start_time

    @property
    def progress_percentage(self) -> float:
        """Percentage of sessions settled."""
        if self.total == 0:
            return 100.0
        return (self.settled / self.total) * 100.0

    def log_progress(self, every_n: int = 1) -> None:
        """Log progress every N settled sessions and when the batch is done."""
        with self._lock:
            settled = self.settled
            successful = self.successful
            failed = self.failed
        if settled % every_n == 0 or settled == self.total:
            logger.info(
                "batch_progress",
                settled=settled,
                total=self.total,
                successful=successful,
                failed=failed,
                percentage=f"{self.progress_percentage:.1f}%",
                elapsed=f"{self.elapsed_seconds:.1f}s",
            )

    def summary(self) -> dict[str, int | float]:
        """Return summary statistics."""
        with self._lock:
            return {
                "total": self.total,
                "settled": self.settled,
                "successful": self.successful,
                "failed": self.failed,
                "duration_seconds": round(self.elapsed_seconds, 2),
            }
