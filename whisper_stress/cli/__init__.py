"""CLI entry point for the transcription stress-test harness."""

from __future__ import annotations

import click

from whisper_stress.cli.commands import check_audio, run


@click.group()
def cli() -> None:
    """Concurrent stress test for streaming transcription servers."""


cli.add_command(run)
cli.add_command(check_audio)
