"""Review state machine for upload sessions.

PENDING_REVIEW -> APPROVED | REJECTED, APPROVED -> COMMITTED. Every write goes
through the store's compare-and-transition, so of two racing reviewers exactly
one succeeds and the other gets InvalidTransitionError with the fresh status.
"""

import re
import uuid
from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import datetime, timezone

from score_intake.exceptions import InvalidTransitionError, SessionNotFoundError, ValidationError
from score_intake.logging.logger import Log
from score_intake.review.models import (
    NewUploadSession,
    ReviewOutcome,
    SessionStatus,
    UploadSession,
    is_valid_transition,
)
from score_intake.review.store import BaseSessionStore
from score_intake.storage.cleanup import TempFileCleaner

_SHA256_HEX = re.compile(r"^[0-9a-f]{64}$")


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class LibraryCommitter(ABC):
    """Hands an approved session to the library-commit process."""

    @abstractmethod
    def commit(self, session: UploadSession) -> None:
        """Start committing the session. Calls back ReviewService.mark_committed when done."""


class ReviewService:
    """Creates sessions and applies reviewer actions to them."""

    def __init__(
        self,
        store: BaseSessionStore,
        cleaner: TempFileCleaner,
        committer: LibraryCommitter | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._store = store
        self._cleaner = cleaner
        self._committer = committer
        self._clock = clock

    def create_session(self, new: NewUploadSession) -> UploadSession:
        """Persist a freshly ingested upload in PENDING_REVIEW."""
        if not isinstance(new.source_sha256, str) or not _SHA256_HEX.match(new.source_sha256):
            raise ValidationError("'source_sha256' must be 64 lowercase hex characters")
        for name in ("file_name", "mime_type", "uploaded_by"):
            value = getattr(new, name)
            if not isinstance(value, str) or not value.strip():
                raise ValidationError(f"'{name}' must be a non-empty string")
        if isinstance(new.confidence_score, bool) or not isinstance(new.confidence_score, int):
            raise ValidationError("'confidence_score' must be an integer")
        if not 0 <= new.confidence_score <= 100:
            raise ValidationError(
                f"'confidence_score' must be between 0 and 100, got {new.confidence_score}"
            )

        now = self._clock()
        session = UploadSession(
            session_id=new.session_id or str(uuid.uuid4()),
            source_sha256=new.source_sha256,
            file_name=new.file_name,
            mime_type=new.mime_type,
            uploaded_by=new.uploaded_by,
            extracted_metadata=new.extracted_metadata,
            confidence_score=new.confidence_score,
            status=SessionStatus.PENDING_REVIEW,
            duplicate_policy=new.duplicate_policy,
            matching_piece_id=new.matching_piece_id,
            part_analysis=new.part_analysis,
            temp_files=list(new.temp_files),
            created_at=now,
            updated_at=now,
        )
        created = self._store.create(session)
        Log.info(
            "Upload session created",
            session_id=created.session_id,
            policy=created.duplicate_policy.value,
        )
        return created

    def reject(
        self,
        session_id: str,
        reviewer_id: str,
        reason: str | None = None,
    ) -> ReviewOutcome:
        """Reject a pending session and archive its temp files.

        Raises:
            SessionNotFoundError: if the session does not exist.
            InvalidTransitionError: if it is not pending review, or a library
                record already originates from it.
        """
        _require_reviewer(reviewer_id)
        if reason is not None and not isinstance(reason, str):
            raise ValidationError("'reason' must be a string or None")

        session = self._require(session_id)
        self._guard(session, SessionStatus.REJECTED)

        entry = f"rejected by {reviewer_id}"
        if reason and reason.strip():
            entry = f"{entry}: {reason.strip()}"
        updated = self._apply(
            session_id, SessionStatus.PENDING_REVIEW, SessionStatus.REJECTED, entry, reviewer_id
        )
        Log.info("Upload session rejected", session_id=session_id, reviewer=reviewer_id)

        return ReviewOutcome(session=updated, cleanup=self._cleaner.cleanup(updated))

    def approve(self, session_id: str, reviewer_id: str) -> ReviewOutcome:
        """Approve a pending session and hand it to the library committer.

        The approval stands even if the handoff fails. The failure is logged and
        reported in ReviewOutcome.commit_error. The session stays APPROVED until
        mark_committed is called.
        """
        _require_reviewer(reviewer_id)
        session = self._require(session_id)
        self._guard(session, SessionStatus.APPROVED)

        updated = self._apply(
            session_id,
            SessionStatus.PENDING_REVIEW,
            SessionStatus.APPROVED,
            f"approved by {reviewer_id}",
            reviewer_id,
        )
        Log.info("Upload session approved", session_id=session_id, reviewer=reviewer_id)

        if self._committer is None:
            return ReviewOutcome(session=updated)
        try:
            self._committer.commit(updated)
        except Exception as exc:
            Log.error("Library commit handoff failed", session_id=session_id, error=str(exc))
            return ReviewOutcome(session=updated, commit_error=str(exc))
        return ReviewOutcome(session=updated)

    def mark_committed(self, session_id: str) -> ReviewOutcome:
        """Record that the library commit finished, then archive temp files."""
        session = self._require(session_id)
        if not is_valid_transition(session.status, SessionStatus.COMMITTED):
            raise InvalidTransitionError(session_id, session.status.value)

        updated = self._apply(
            session_id, SessionStatus.APPROVED, SessionStatus.COMMITTED, "committed to library"
        )
        Log.info("Upload session committed", session_id=session_id)
        return ReviewOutcome(session=updated, cleanup=self._cleaner.cleanup(updated))

    def _require(self, session_id: str) -> UploadSession:
        if not isinstance(session_id, str) or not session_id:
            raise ValidationError("'session_id' must be a non-empty string")
        session = self._store.find_by_id(session_id)
        if session is None:
            raise SessionNotFoundError(f"Upload session {session_id} not found")
        return session

    def _guard(self, session: UploadSession, target: SessionStatus) -> None:
        if not is_valid_transition(session.status, target):
            raise InvalidTransitionError(session.session_id, session.status.value)
        # A stale PENDING_REVIEW must not hide a session already in the library.
        if self._store.has_library_record(session.session_id):
            raise InvalidTransitionError(
                session.session_id,
                session.status.value,
                "a library record already originates from this session",
            )

    def _apply(
        self,
        session_id: str,
        expected: SessionStatus,
        target: SessionStatus,
        audit_entry: str,
        reviewer_id: str | None = None,
    ) -> UploadSession:
        updated = self._store.transition(
            session_id,
            expected,
            target,
            audit_entry=audit_entry,
            now=self._clock(),
            reviewed_by=reviewer_id,
        )
        if updated is not None:
            return updated
        current = self._require(session_id)
        Log.warning(
            "Lost review transition race",
            session_id=session_id,
            current_status=current.status.value,
        )
        raise InvalidTransitionError(session_id, current.status.value, "status changed concurrently")


def _require_reviewer(reviewer_id: object) -> None:
    if not isinstance(reviewer_id, str) or not reviewer_id.strip():
        raise ValidationError("'reviewer_id' must be a non-empty string")
