"""Shared test fixtures for the transcription stress-test harness."""

from __future__ import annotations

import os
import wave
from typing import TYPE_CHECKING

import pytest
import structlog
from fake_clients import RELEASE_HUNG_CLIENTS

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


@pytest.fixture(autouse=True)
def release_hung_clients() -> Iterator[None]:
    """Let hung fake clients finish once a test is over."""
    RELEASE_HUNG_CLIENTS.clear()
    yield
    RELEASE_HUNG_CLIENTS.set()


@pytest.fixture(autouse=True)
def reset_structlog() -> Iterator[None]:
    """Undo any logging configuration a CLI test applied."""
    yield
    structlog.reset_defaults()


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Keep WHISPER_STRESS_* variables and stray .env files out of tests."""
    for key in list(os.environ):
        if key.upper().startswith("WHISPER_STRESS_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


def _write_wav(path: Path, sample_rate: int = 16000, channels: int = 1, sample_width: int = 2) -> Path:
    with wave.open(str(path), "wb") as wav_file:
        wav_file.setnchannels(channels)
        wav_file.setsampwidth(sample_width)
        wav_file.setframerate(sample_rate)
        wav_file.writeframes(b"\x00" * (sample_width * channels * sample_rate // 10))
    return path


@pytest.fixture
def audio_file(tmp_path: Path) -> str:
    """A 100 ms silent 16 kHz mono 16-bit WAV file."""
    return str(_write_wav(tmp_path / "sample_16k.wav"))


@pytest.fixture
def stereo_audio_file(tmp_path: Path) -> str:
    """A 44.1 kHz stereo WAV file that does not match the expected format."""
    return str(_write_wav(tmp_path / "sample_44k.wav", sample_rate=44100, channels=2))
