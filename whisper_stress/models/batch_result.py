"""Batch result model: every outcome collected for one stress-test run."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from whisper_stress.models.session_outcome import SessionOutcome


class BatchResult(BaseModel):
    """Outcomes of a batch, ordered by client ID.

    On a complete run ``outcomes`` holds exactly ``client_count`` entries. When
    the global deadline interrupted the run it holds whatever had settled.
    """

    model_config = ConfigDict(frozen=True)

    client_count: int
    outcomes: list[SessionOutcome] = []
    total_time_ms: int = 0
    interrupted: bool = False
    interruption_reason: str | None = None

    @field_validator("client_count")
    @classmethod
    def validate_client_count(cls, value: int) -> int:
        """Client count must be non-negative."""
        if value < 0:
            msg = "client_count must be >= 0"
            raise ValueError(msg)
        return value

    @field_validator("outcomes")
    @classmethod
    def validate_outcomes(cls, value: list[SessionOutcome]) -> list[SessionOutcome]:
        """Outcomes are sorted by client ID and IDs must be unique."""
        ordered = sorted(value, key=lambda outcome: outcome.client_id)
        ids = [outcome.client_id for outcome in ordered]
        if len(ids) != len(set(ids)):
            msg = "outcomes must have unique client IDs"
            raise ValueError(msg)
        return ordered

    @model_validator(mode="after")
    def validate_client_ids_in_range(self) -> BatchResult:
        for outcome in self.outcomes:
            if outcome.client_id > self.client_count:
                msg = f"client_id {outcome.client_id} is outside 1..{self.client_count}"
                raise ValueError(msg)
        return self

    @property
    def successful(self) -> list[SessionOutcome]:
        return [outcome for outcome in self.outcomes if outcome.succeeded]

    @property
    def failed(self) -> list[SessionOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.succeeded]
