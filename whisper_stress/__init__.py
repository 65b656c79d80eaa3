"""Concurrent stress-test harness for streaming transcription servers."""

__version__ = "0.1.0"
