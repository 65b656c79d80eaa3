"""Retry logic with structured logging using tenacity."""

from __future__ import annotations

import functools
from typing import TYPE_CHECKING, ParamSpec, TypeVar

from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from whisper_stress.utils.logger import get_logger

if TYPE_CHECKING:
    from collections.abc import Callable

P = ParamSpec("P")
T = TypeVar("T")

logger = get_logger(__name__)

# Transport-level failures retried during connect.
_RETRYABLE_EXCEPTIONS: tuple[type[BaseException], ...] = (
    ConnectionError,
    TimeoutError,
    OSError,
)


def _log_retry(retry_state: RetryCallState) -> None:
    """Log retry attempt with structured context."""
    logger.warning(
        "retrying_operation",
        attempt=retry_state.attempt_number,
        function=getattr(retry_state.fn, "__name__", "unknown"),
        error=str(retry_state.outcome.exception()) if retry_state.outcome else "unknown",
    )


def retry_with_logging(
    max_attempts: int = 3,
    min_wait: float = 2.0,
    max_wait: float = 10.0,
) -> Callable[[Callable[P, T]], Callable[P, T]]:
    """Decorator using tenacity with structured logging.

    Retries on ConnectionError, TimeoutError and OSError with exponential
    backoff between ``min_wait`` and ``max_wait`` seconds. The last error is
    re-raised once attempts are exhausted.
    """

    def decorator(func: Callable[P, T]) -> Callable[P, T]:
        @retry(
            stop=stop_after_attempt(max_attempts),
            wait=wait_exponential(multiplier=1, min=min_wait, max=max_wait),
            retry=retry_if_exception_type(_RETRYABLE_EXCEPTIONS),
            before_sleep=_log_retry,
            reraise=True,
        )
        @functools.wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            return func(*args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator
