"""Failure reason classification for the failure histogram."""

from __future__ import annotations

from enum import StrEnum


class FailureCategory(StrEnum):
    TIMEOUT = "Timeout"
    TRANSPORT_ERROR = "Transport Error"
    SERVER_UNAVAILABLE = "Server Unavailable"
    UNKNOWN = "Unknown"


TIMEOUT_MARKERS: tuple[str, ...] = ("timed out",)

TRANSPORT_MARKERS: tuple[str, ...] = (
    "WebSocket",
    "Connection refused",
    "Connection reset",
    "ECONNREFUSED",
    "ECONNRESET",
)

UNAVAILABLE_MARKERS: tuple[str, ...] = (
    "Server is not available",
    "Service Unavailable",
)

# Checked in order, first match wins
CATEGORY_MARKERS: list[tuple[FailureCategory, tuple[str, ...]]] = [
    (FailureCategory.TIMEOUT, TIMEOUT_MARKERS),
    (FailureCategory.TRANSPORT_ERROR, TRANSPORT_MARKERS),
    (FailureCategory.SERVER_UNAVAILABLE, UNAVAILABLE_MARKERS),
]

REASON_SEPARATOR = ":"


def classify_failure(error_message: str | None) -> str:
    """Map a failed session's error message to a histogram bucket.

    Known markers map to a FailureCategory value. Anything else is bucketed by
    the text before the first ':' (e.g. "ProtocolError: bad frame" ->
    "ProtocolError"). Missing messages are "Unknown".
    """
    if not error_message:
        return FailureCategory.UNKNOWN.value

    for category, markers in CATEGORY_MARKERS:
        if any(marker in error_message for marker in markers):
            return category.value

    reason = error_message.split(REASON_SEPARATOR, 1)[0].strip()
    return reason or FailureCategory.UNKNOWN.value


def is_timeout_failure(error_message: str | None) -> bool:
    """Check whether an error message describes a deadline being exceeded."""
    return classify_failure(error_message) == FailureCategory.TIMEOUT.value


def build_failure_histogram(error_messages: list[str | None]) -> dict[str, int]:
    """Count failures per bucket, in order of first appearance."""
    counts: dict[str, int] = {}
    for message in error_messages:
        bucket = classify_failure(message)
        counts[bucket] = counts.get(bucket, 0) + 1
    return counts
