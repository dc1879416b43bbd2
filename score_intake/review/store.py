from abc import ABC, abstractmethod
from datetime import datetime

from score_intake.dedup.models import PieceMatch, SessionMatch
from score_intake.review.models import SessionStatus, UploadSession


def append_audit(existing: str | None, entry: str) -> str:
    """Append one line to a routing-decision audit trail."""
    return f"{existing}\n{entry}" if existing else entry


class BaseSessionStore(ABC):
    """Contract for upload-session persistence and the lookups ingestion needs."""

    @abstractmethod
    def create(self, session: UploadSession) -> UploadSession:
        """Insert a new session row."""

    @abstractmethod
    def find_by_id(self, session_id: str) -> UploadSession | None:
        """Return the session, or None if it does not exist."""

    @abstractmethod
    def find_by_source_sha256(self, source_sha256: str) -> SessionMatch | None:
        """Return the earliest session whose source bytes hash to this value."""

    @abstractmethod
    def find_piece_by_work_fingerprint(self, fingerprint_hash: str) -> PieceMatch | None:
        """Return a library piece whose title/composer fingerprint matches."""

    @abstractmethod
    def has_library_record(self, session_id: str) -> bool:
        """Whether a committed library record names this session as its origin."""

    @abstractmethod
    def committed_storage_keys(self, keys: list[str]) -> set[str]:
        """Subset of keys already referenced by committed library records."""

    @abstractmethod
    def transition(
        self,
        session_id: str,
        expected: SessionStatus,
        target: SessionStatus,
        *,
        audit_entry: str,
        now: datetime,
        reviewed_by: str | None = None,
    ) -> UploadSession | None:
        """Move a session from expected to target status.

        Writes only if the stored status still equals ``expected``. reviewed_by
        and reviewed_at are set only when still empty. Returns the updated
        session, or None when the pre-state did not match.
        """

    @abstractmethod
    def clear_temp_files(self, session_id: str) -> None:
        """Forget the session's temp-file keys after cleanup."""

    def close(self) -> None:
        """Release resources held by the store."""
