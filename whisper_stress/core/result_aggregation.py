"""Batch result aggregation functions."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING

from whisper_stress.core.failure_classification import (
    build_failure_histogram,
    is_timeout_failure,
)

if TYPE_CHECKING:
    from whisper_stress.models.batch_result import BatchResult
    from whisper_stress.models.session_outcome import SessionOutcome

EXCELLENT_THRESHOLD = 1.0
GOOD_THRESHOLD = 0.8
MODERATE_THRESHOLD = 0.5


class RecommendationTier(StrEnum):
    EXCELLENT = "excellent"
    GOOD = "good"
    MODERATE = "moderate"
    POOR = "poor"
    NOT_APPLICABLE = "not_applicable"


@dataclass
class BatchSummary:
    """Aggregate statistics for one stress-test run."""

    client_count: int
    successful: int = 0
    failed: int = 0
    min_duration_ms: int | None = None
    avg_duration_ms: float | None = None
    max_duration_ms: int | None = None
    failure_histogram: dict[str, int] = field(default_factory=dict)
    timeout_failures: int = 0

    @property
    def success_rate(self) -> float:
        """Percentage of launched clients that succeeded (0.0 when none launched)."""
        if self.client_count == 0:
            return 0.0
        return (self.successful / self.client_count) * 100.0

    @property
    def recommendation(self) -> RecommendationTier:
        return recommend_tier(self.successful, self.client_count)


def recommend_tier(successful: int, client_count: int) -> RecommendationTier:
    """Pick the recommendation tier from the share of successful clients.

    Thresholds are relative to the number of launched clients, so sessions
    that never reported (interrupted run) count against the tier.
    """
    if client_count == 0:
        return RecommendationTier.NOT_APPLICABLE
    if successful >= client_count * EXCELLENT_THRESHOLD:
        return RecommendationTier.EXCELLENT
    if successful >= client_count * GOOD_THRESHOLD:
        return RecommendationTier.GOOD
    if successful >= client_count * MODERATE_THRESHOLD:
        return RecommendationTier.MODERATE
    return RecommendationTier.POOR


def summarize_outcomes(outcomes: list[SessionOutcome], client_count: int) -> BatchSummary:
    """Aggregate a (possibly partial) set of outcomes into a BatchSummary.

    Duration statistics only consider successful outcomes. Classification of
    failures feeds the histogram and never changes the pass/fail counts.
    """
    successful = [outcome for outcome in outcomes if outcome.succeeded]
    failed = [outcome for outcome in outcomes if not outcome.succeeded]

    summary = BatchSummary(
        client_count=client_count,
        successful=len(successful),
        failed=len(failed),
    )

    durations = [outcome.duration_ms for outcome in successful if outcome.duration_ms is not None]
    if durations:
        summary.min_duration_ms = min(durations)
        summary.max_duration_ms = max(durations)
        summary.avg_duration_ms = sum(durations) / len(durations)

    messages = [outcome.error_message for outcome in failed]
    summary.failure_histogram = build_failure_histogram(messages)
    summary.timeout_failures = sum(1 for message in messages if is_timeout_failure(message))
    return summary


def summarize_batch(result: BatchResult) -> BatchSummary:
    """Aggregate a BatchResult into a BatchSummary."""
    return summarize_outcomes(result.outcomes, result.client_count)
