"""Pre-launch checks for the target audio resource."""

from __future__ import annotations

import wave
from pathlib import Path

from whisper_stress.core.errors import PreconditionError
from whisper_stress.utils.logger import get_logger

logger = get_logger(__name__)

EXPECTED_SAMPLE_RATE = 16000
EXPECTED_CHANNELS = 1
EXPECTED_SAMPLE_WIDTH = 2  # bytes, 16-bit PCM


def find_wav_format_issues(path: Path) -> list[str]:
    """Compare a WAV file's header against 16 kHz / mono / 16-bit PCM.

    Returns a list of human-readable mismatches (empty when the format fits).
    """
    try:
        with wave.open(str(path), "rb") as wav_file:
            sample_rate = wav_file.getframerate()
            channels = wav_file.getnchannels()
            sample_width = wav_file.getsampwidth()
    except (wave.Error, EOFError) as exc:
        return [f"not a readable PCM WAV file: {exc}"]

    issues: list[str] = []
    if sample_rate != EXPECTED_SAMPLE_RATE:
        issues.append(f"sample rate is {sample_rate} Hz, expected {EXPECTED_SAMPLE_RATE} Hz")
    if channels != EXPECTED_CHANNELS:
        issues.append(f"{channels} channels, expected mono")
    if sample_width != EXPECTED_SAMPLE_WIDTH:
        issues.append(f"sample width is {sample_width * 8}-bit, expected 16-bit")
    return issues


def check_audio_file(audio_file: str) -> Path:
    """Ensure the audio file exists before any session launches.

    A missing file raises PreconditionError. Format mismatches are only
    logged, the server decides whether it can handle the file.
    """
    path = Path(audio_file)
    if not path.is_file():
        msg = f"Audio file not found: {audio_file}"
        raise PreconditionError(msg)

    for issue in find_wav_format_issues(path):
        logger.warning("audio_format_mismatch", audio_file=str(path), issue=issue)

    return path
