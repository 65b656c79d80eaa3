"""Unit tests for report rendering."""

from __future__ import annotations

from datetime import UTC, datetime

from builders import make_failure, make_success

from whisper_stress.core.errors import BatchTimeoutError
from whisper_stress.core.report_formatting import (
    format_interruption,
    format_outcome_row,
    format_report,
    format_run_header,
)
from whisper_stress.core.result_aggregation import summarize_batch
from whisper_stress.models.batch_result import BatchResult
from whisper_stress.models.config import Config


def _render(result: BatchResult) -> str:
    return format_report(result, summarize_batch(result))


class TestFormatOutcomeRow:
    """Tests for format_outcome_row."""

    def test_success_row(self) -> None:
        assert format_outcome_row(make_success(1, 512)) == "     1 | Success   |    512ms |"

    def test_failure_row_truncates_error(self) -> None:
        message = "Client 12 timed out after 180 seconds"
        row = format_outcome_row(make_failure(12, message, duration_ms=180003))
        assert row.startswith("    12 | Failed    | 180003ms | ")
        assert row.endswith(message[:30] + "...")

    def test_missing_duration_is_na(self) -> None:
        from whisper_stress.models.session_outcome import SessionOutcome

        pending = SessionOutcome.start(4)
        assert "N/A" in format_outcome_row(pending)


class TestFormatReport:
    """Tests for format_report."""

    def test_single_success(self) -> None:
        result = BatchResult(client_count=1, outcomes=[make_success(1, 500)], total_time_ms=512)
        report = _render(result)
        assert "Total execution time: 512ms (0.51s)" in report
        assert "Successful transcriptions: 1/1" in report
        assert "Failed transcriptions: 0/1" in report
        assert "Success rate: 100.0%" in report
        assert "Average duration: 500ms" in report
        assert "Fastest client: 500ms" in report
        assert "Slowest client: 500ms" in report
        assert "[EXCELLENT]" in report
        assert "FAILURE ANALYSIS" not in report

    def test_mixed_results(self) -> None:
        result = BatchResult(
            client_count=3,
            outcomes=[
                make_success(1, 1000),
                make_failure(2, "Connection refused", duration_ms=2),
                make_success(3, 1000),
            ],
            total_time_ms=1003,
        )
        report = _render(result)
        assert "Success rate: 66.7%" in report
        assert "FAILURE ANALYSIS:" in report
        assert "  Transport Error: 1 occurrences" in report
        assert "[MODERATE]" in report

    def test_table_rows_ordered_by_client(self) -> None:
        result = BatchResult(
            client_count=2,
            outcomes=[make_success(2, 10), make_success(1, 20)],
        )
        lines = _render(result).splitlines()
        header = lines.index("Client | Status    | Duration | Error")
        assert lines[header + 2].startswith("     1 |")
        assert lines[header + 3].startswith("     2 |")

    def test_timeout_note(self) -> None:
        result = BatchResult(
            client_count=2,
            outcomes=[
                make_success(1, 100),
                make_failure(2, "Client 2 timed out after 180 seconds", duration_ms=180000),
            ],
        )
        report = _render(result)
        assert "Note: 1 clients timed out." in report
        assert "  Timeout: 1 occurrences" in report

    def test_no_timing_section_without_successes(self) -> None:
        result = BatchResult(client_count=1, outcomes=[make_failure(1, "boom")])
        report = _render(result)
        assert "TIMING STATISTICS" not in report
        assert "[POOR]" in report

    def test_empty_batch(self) -> None:
        report = _render(BatchResult(client_count=0))
        assert "Successful transcriptions: 0/0" in report
        assert "Success rate: 0.0%" in report
        assert "[N/A]" in report

    def test_interrupted_batch_mentions_reported_sessions(self) -> None:
        result = BatchResult(
            client_count=10,
            outcomes=[make_success(client_id, 100) for client_id in range(1, 8)],
            interrupted=True,
        )
        report = _render(result)
        assert "Sessions reported before interruption: 7/10" in report
        assert "Successful transcriptions: 7/10" in report


class TestHeaderAndInterruption:
    """Tests for format_run_header and format_interruption."""

    def test_run_header(self) -> None:
        config = Config(client_count=4, audio_file="clip.wav")
        started_at = datetime(2025, 3, 1, 9, 30, tzinfo=UTC)
        header = format_run_header(config, started_at=started_at)
        assert "Running 4 concurrent transcriptions" in header
        assert "Audio file: clip.wav" in header
        assert "Start time: 2025-03-01T09:30:00+00:00" in header
        assert "Maximum timeout: 180s per client" in header
        assert "Global timeout: 210s" in header

    def test_interruption(self) -> None:
        error = BatchTimeoutError(210.0, BatchResult(client_count=1, interrupted=True))
        block = format_interruption(error, 210004)
        assert "STRESS TEST INTERRUPTED" in block
        assert "Total time before interruption: 210004ms (210.00s)" in block
        assert "Error: Entire stress test timed out after 210 seconds" in block
