"""Session outcome model: the terminal record of one client session."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, field_validator, model_validator


class SessionOutcome(BaseModel):
    """Describes whether and how a single client session finished.

    A pending outcome (created at session start) has neither ``ended_at`` nor
    ``error_message``. It is completed exactly once through :meth:`succeed` or
    :meth:`fail`, each of which returns a new frozen record.
    """

    model_config = ConfigDict(frozen=True)

    client_id: int
    succeeded: bool = False
    started_at: datetime
    ended_at: datetime | None = None
    duration_ms: int | None = None
    error_message: str | None = None

    @field_validator("client_id")
    @classmethod
    def validate_client_id(cls, value: int) -> int:
        """Client IDs are 1-based."""
        if value < 1:
            msg = "client_id must be >= 1"
            raise ValueError(msg)
        return value

    @field_validator("duration_ms")
    @classmethod
    def validate_duration_ms(cls, value: int | None) -> int | None:
        """Duration must be non-negative when present."""
        if value is not None and value < 0:
            msg = "duration_ms must be >= 0"
            raise ValueError(msg)
        return value

    @model_validator(mode="after")
    def validate_completion_state(self) -> SessionOutcome:
        if self.succeeded:
            if self.error_message is not None:
                msg = "a successful outcome cannot carry an error_message"
                raise ValueError(msg)
            if self.ended_at is None or self.duration_ms is None:
                msg = "a successful outcome requires ended_at and duration_ms"
                raise ValueError(msg)
        elif self.error_message is not None and (
            self.ended_at is None or self.duration_ms is None
        ):
            msg = "a failed outcome requires ended_at and duration_ms"
            raise ValueError(msg)
        return self

    @classmethod
    def start(cls, client_id: int, started_at: datetime | None = None) -> SessionOutcome:
        """Create the pending record for a session that is starting now."""
        return cls(client_id=client_id, started_at=started_at or datetime.now(UTC))

    @property
    def is_completed(self) -> bool:
        return self.ended_at is not None

    def succeed(self, ended_at: datetime, duration_ms: int) -> SessionOutcome:
        """Return the completed, successful version of this pending outcome."""
        self._ensure_pending()
        return SessionOutcome(
            client_id=self.client_id,
            succeeded=True,
            started_at=self.started_at,
            ended_at=ended_at,
            duration_ms=duration_ms,
        )

    def fail(self, ended_at: datetime, duration_ms: int, error_message: str) -> SessionOutcome:
        """Return the completed, failed version of this pending outcome."""
        self._ensure_pending()
        return SessionOutcome(
            client_id=self.client_id,
            succeeded=False,
            started_at=self.started_at,
            ended_at=ended_at,
            duration_ms=duration_ms,
            error_message=error_message or "Unknown error",
        )

    def _ensure_pending(self) -> None:
        if self.is_completed:
            msg = f"outcome for client {self.client_id} is already completed"
            raise ValueError(msg)
