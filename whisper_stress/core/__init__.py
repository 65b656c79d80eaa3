"""Core -- pure functions for failure classification, aggregation and reporting."""

from __future__ import annotations

from whisper_stress.core.failure_classification import (
    FailureCategory,
    build_failure_histogram,
    classify_failure,
    is_timeout_failure,
)
from whisper_stress.core.result_aggregation import (
    BatchSummary,
    RecommendationTier,
    recommend_tier,
    summarize_batch,
    summarize_outcomes,
)

__all__ = [
    "BatchSummary",
    "FailureCategory",
    "RecommendationTier",
    "build_failure_histogram",
    "classify_failure",
    "is_timeout_failure",
    "recommend_tier",
    "summarize_batch",
    "summarize_outcomes",
]
