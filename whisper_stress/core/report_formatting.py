"""Human-readable report rendering for stress-test runs."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from whisper_stress.core.result_aggregation import RecommendationTier

if TYPE_CHECKING:
    from whisper_stress.core.result_aggregation import BatchSummary
    from whisper_stress.models.batch_result import BatchResult
    from whisper_stress.models.config import Config
    from whisper_stress.models.session_outcome import SessionOutcome

ERROR_PREVIEW_LENGTH = 30

RECOMMENDATIONS: dict[RecommendationTier, str] = {
    RecommendationTier.EXCELLENT: (
        "[EXCELLENT] The server handled all concurrent requests successfully."
    ),
    RecommendationTier.GOOD: (
        "[GOOD] Good performance, but some failures occurred. Check server resources."
    ),
    RecommendationTier.MODERATE: (
        "[MODERATE] Moderate performance. Consider optimizing server configuration."
    ),
    RecommendationTier.POOR: (
        "[POOR] Poor performance. Server may be overloaded or misconfigured."
    ),
    RecommendationTier.NOT_APPLICABLE: "[N/A] No clients were launched.",
}


def _format_total_time(total_time_ms: int) -> str:
    return f"{total_time_ms}ms ({total_time_ms / 1000:.2f}s)"


def format_run_header(config: Config, started_at: datetime | None = None) -> str:
    """Format the banner printed before the clients are launched."""
    started_at = started_at or datetime.now(UTC)
    lines = [
        "WhisperLive Stress Test",
        "=======================",
        f"Running {config.client_count} concurrent transcriptions",
        f"Audio file: {config.audio_file}",
        f"Start time: {started_at.isoformat()}",
        f"Maximum timeout: {config.session_timeout_seconds:g}s per client",
        f"Global timeout: {config.global_timeout_seconds:g}s",
    ]
    return "\n".join(lines)


def format_outcome_row(outcome: SessionOutcome) -> str:
    """Format one row of the detailed results table."""
    status = "Success" if outcome.succeeded else "Failed "
    duration = f"{outcome.duration_ms}ms" if outcome.duration_ms is not None else "N/A"
    error = ""
    if outcome.error_message:
        error = outcome.error_message[:ERROR_PREVIEW_LENGTH] + "..."
    return f"{outcome.client_id:>6} | {status}   | {duration:>8} | {error}".rstrip()


def format_report(result: BatchResult, summary: BatchSummary) -> str:
    """Format the full results report for a complete or interrupted run."""
    total = summary.client_count
    lines = [
        "",
        "STRESS TEST RESULTS",
        "===================",
        f"Total execution time: {_format_total_time(result.total_time_ms)}",
        f"Successful transcriptions: {summary.successful}/{total}",
        f"Failed transcriptions: {summary.failed}/{total}",
        f"Success rate: {summary.success_rate:.1f}%",
    ]

    if result.interrupted:
        reported = len(result.outcomes)
        lines.append(f"Sessions reported before interruption: {reported}/{total}")

    if summary.avg_duration_ms is not None:
        lines.extend(
            [
                "",
                "TIMING STATISTICS (successful clients only):",
                f"Average duration: {summary.avg_duration_ms:.0f}ms",
                f"Fastest client: {summary.min_duration_ms}ms",
                f"Slowest client: {summary.max_duration_ms}ms",
            ]
        )

    lines.extend(
        [
            "",
            "DETAILED RESULTS:",
            "Client | Status    | Duration | Error",
            "-------|-----------|----------|------",
        ]
    )
    lines.extend(format_outcome_row(outcome) for outcome in result.outcomes)

    if summary.failure_histogram:
        lines.extend(["", "FAILURE ANALYSIS:"])
        for bucket, count in summary.failure_histogram.items():
            lines.append(f"  {bucket}: {count} occurrences")

    lines.extend(["", "RECOMMENDATIONS:", RECOMMENDATIONS[summary.recommendation]])
    if summary.timeout_failures:
        lines.append(
            f"Note: {summary.timeout_failures} clients timed out. "
            "Consider increasing the timeout or checking server performance."
        )

    return "\n".join(lines)


def format_interruption(error: BaseException, total_time_ms: int) -> str:
    """Format the block printed when the global deadline interrupts the run."""
    lines = [
        "",
        "STRESS TEST INTERRUPTED",
        f"Total time before interruption: {_format_total_time(total_time_ms)}",
        f"Error: {error}",
    ]
    return "\n".join(lines)
