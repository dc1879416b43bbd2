from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from score_intake.dedup.models import DuplicatePolicy
from score_intake.metadata.models import ExtractedMetadata
from score_intake.pdf.models import PartAnalysis


class SessionStatus(str, Enum):
    PENDING_REVIEW = "PENDING_REVIEW"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    COMMITTED = "COMMITTED"


# REJECTED and COMMITTED are terminal; nothing ever returns to PENDING_REVIEW.
ALLOWED_TRANSITIONS: dict[SessionStatus, frozenset[SessionStatus]] = {
    SessionStatus.PENDING_REVIEW: frozenset({SessionStatus.APPROVED, SessionStatus.REJECTED}),
    SessionStatus.APPROVED: frozenset({SessionStatus.COMMITTED}),
    SessionStatus.REJECTED: frozenset(),
    SessionStatus.COMMITTED: frozenset(),
}


def is_valid_transition(current: SessionStatus, target: SessionStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


@dataclass(frozen=True)
class NewUploadSession:
    """Input for creating a session from a finished ingestion pipeline."""

    source_sha256: str
    file_name: str
    mime_type: str
    uploaded_by: str
    extracted_metadata: ExtractedMetadata
    confidence_score: int
    duplicate_policy: DuplicatePolicy
    part_analysis: PartAnalysis
    matching_piece_id: str | None = None
    temp_files: list[str] = field(default_factory=list)
    session_id: str | None = None


@dataclass(frozen=True)
class UploadSession:
    """A submitted file awaiting, or past, human review."""

    session_id: str
    source_sha256: str
    file_name: str
    mime_type: str
    uploaded_by: str
    extracted_metadata: ExtractedMetadata
    confidence_score: int
    status: SessionStatus
    duplicate_policy: DuplicatePolicy
    part_analysis: PartAnalysis
    created_at: datetime
    updated_at: datetime
    matching_piece_id: str | None = None
    temp_files: list[str] = field(default_factory=list)
    reviewed_by: str | None = None
    reviewed_at: datetime | None = None
    routing_decision: str | None = None


@dataclass(frozen=True)
class CleanupResult:
    """Side-channel outcome of best-effort temp-file removal."""

    attempted: bool
    deleted: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.attempted and not self.failed and not self.errors


@dataclass(frozen=True)
class ReviewOutcome:
    """Primary result of a review action, kept apart from its cleanup result."""

    session: UploadSession
    cleanup: CleanupResult | None = None
    commit_error: str | None = None

    def to_response(self) -> dict[str, object]:
        reviewed_at = self.session.reviewed_at
        return {
            "success": True,
            "session": {
                "id": self.session.session_id,
                "status": self.session.status.value,
                "reviewedAt": reviewed_at.isoformat() if reviewed_at else None,
            },
        }
