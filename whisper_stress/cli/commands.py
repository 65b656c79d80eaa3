"""CLI command implementations for the transcription stress-test harness."""

from __future__ import annotations

import sys
from typing import Any

import click
from pydantic import ValidationError

from whisper_stress.core.errors import BatchTimeoutError, PreconditionError
from whisper_stress.core.report_formatting import (
    format_interruption,
    format_report,
    format_run_header,
)
from whisper_stress.core.result_aggregation import summarize_batch
from whisper_stress.models.config import Config
from whisper_stress.utils.logger import configure_logging


def _get_config(**overrides: Any) -> Config:
    """Load configuration from environment/.env, applying CLI overrides."""
    return Config(**overrides)


def _load_config_or_exit(**overrides: Any) -> Config:
    try:
        return _get_config(**{key: value for key, value in overrides.items() if value is not None})
    except ValidationError as exc:
        click.echo(f"[ERROR] Invalid configuration:\n{exc}")
        sys.exit(1)


@click.command()
@click.option("--clients", "client_count", default=None, type=int, help="Concurrent clients")
@click.option("--audio-file", default=None, type=str, help="16 kHz mono 16-bit WAV file")
@click.option(
    "--session-timeout",
    "session_timeout_seconds",
    default=None,
    type=float,
    help="Per-client deadline in seconds",
)
@click.option(
    "--global-timeout",
    "global_timeout_seconds",
    default=None,
    type=float,
    help="Whole-run deadline in seconds",
)
@click.option(
    "--client-factory",
    default=None,
    type=str,
    help="Transcription client import path, 'package.module:attribute'",
)
@click.option("--connect-attempts", default=None, type=int, help="Connect attempts per client")
def run(
    client_count: int | None,
    audio_file: str | None,
    session_timeout_seconds: float | None,
    global_timeout_seconds: float | None,
    client_factory: str | None,
    connect_attempts: int | None,
) -> None:
    """Launch concurrent transcription sessions and report how the server coped."""
    config = _load_config_or_exit(
        client_count=client_count,
        audio_file=audio_file,
        session_timeout_seconds=session_timeout_seconds,
        global_timeout_seconds=global_timeout_seconds,
        client_factory=client_factory,
        connect_attempts=connect_attempts,
    )
    configure_logging(config.log_level)

    from whisper_stress.services.batch_orchestrator import BatchOrchestrator
    from whisper_stress.services.client_loader import load_client_factory
    from whisper_stress.services.session_runner import SessionRunner
    from whisper_stress.utils.preconditions import check_audio_file

    try:
        check_audio_file(config.audio_file)
        factory = load_client_factory(config.client_factory, config.client_options)
    except PreconditionError as exc:
        click.echo(f"[ERROR] {exc}")
        click.echo("[INFO] Make sure the audio file exists and a client factory is configured.")
        sys.exit(1)

    runner = SessionRunner(
        client_factory=factory,
        audio_file=config.audio_file,
        session_timeout_seconds=config.session_timeout_seconds,
        connect_attempts=config.connect_attempts,
    )
    orchestrator = BatchOrchestrator(runner, global_timeout_seconds=config.global_timeout_seconds)

    click.echo(format_run_header(config))
    click.echo(f"\n[INFO] Launching all {config.client_count} clients simultaneously...\n")

    try:
        result = orchestrator.run_batch(config.client_count)
    except BatchTimeoutError as exc:
        click.echo(format_interruption(exc, exc.partial.total_time_ms))
        if exc.partial.outcomes:
            click.echo(format_report(exc.partial, summarize_batch(exc.partial)))
        click.echo(f"\n[ERROR] Stress test failed: {exc}")
        sys.exit(1)

    click.echo(format_report(result, summarize_batch(result)))
    click.echo("\n[SUCCESS] Stress test completed!")
    click.echo("Check the results above to assess the server's performance under load.")


@click.command()
@click.argument("audio_file", required=False)
def check_audio(audio_file: str | None) -> None:
    """Check that the audio file exists and is 16 kHz mono 16-bit PCM."""
    config = _load_config_or_exit(audio_file=audio_file)
    configure_logging(config.log_level)

    from whisper_stress.utils.preconditions import check_audio_file, find_wav_format_issues

    try:
        path = check_audio_file(config.audio_file)
    except PreconditionError as exc:
        click.echo(f"[ERROR] {exc}")
        sys.exit(1)

    issues = find_wav_format_issues(path)
    if issues:
        click.echo(f"[WARNING] {path} does not match the expected format:")
        for issue in issues:
            click.echo(f"  - {issue}")
        return
    click.echo(f"[SUCCESS] {path} is 16 kHz mono 16-bit PCM.")
