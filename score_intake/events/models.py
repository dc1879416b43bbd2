from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class EventType(str, Enum):
    PROGRESS = "progress"
    COMPLETED = "completed"
    FAILED = "failed"


TERMINAL_EVENT_TYPES = frozenset({EventType.COMPLETED, EventType.FAILED})


@dataclass(frozen=True)
class ProgressEvent:
    """One update about an ingestion job, as seen by subscribers."""

    job_id: str
    type: EventType
    session_id: str | None
    data: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def is_terminal(self) -> bool:
        return self.type in TERMINAL_EVENT_TYPES

    def to_envelope(self) -> dict[str, Any]:
        """Wire shape pushed to clients."""
        return {
            "type": self.type.value,
            "jobId": self.job_id,
            "timestamp": self.timestamp.isoformat(),
            "data": dict(self.data),
        }
