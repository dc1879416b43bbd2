from dataclasses import dataclass
from enum import Enum


class DuplicatePolicy(str, Enum):
    """How the pipeline routes an upload after duplicate checks."""

    NEW_PIECE = "NEW_PIECE"
    SKIP_DUPLICATE = "SKIP_DUPLICATE"
    VERSION_UPDATE = "VERSION_UPDATE"
    EXCEPTION_REVIEW = "EXCEPTION_REVIEW"


@dataclass(frozen=True)
class DuplicateCheckResult:
    """Outcome of one duplicate check, or of the resolved policy."""

    policy: DuplicatePolicy
    is_duplicate: bool
    reason: str
    matching_session_id: str | None = None
    matching_piece_id: str | None = None


@dataclass(frozen=True)
class SessionMatch:
    """An existing upload session found by source hash."""

    session_id: str
    status: str


@dataclass(frozen=True)
class PieceMatch:
    """An existing library piece found by work fingerprint."""

    piece_id: str
    title: str
