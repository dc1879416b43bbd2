"""Duplicate policy resolution.

These are pure functions: the caller looks up existing sessions and pieces in
the store and passes the match (or None) in.
"""

from score_intake.dedup.models import (
    DuplicateCheckResult,
    DuplicatePolicy,
    PieceMatch,
    SessionMatch,
)
from score_intake.fingerprint.models import WorkFingerprint


def check_source_duplicate(
    source_sha256: str,
    existing: SessionMatch | None,
) -> DuplicateCheckResult:
    """Exact byte match against an earlier upload is authoritative: skip it."""
    if existing is None:
        return DuplicateCheckResult(
            policy=DuplicatePolicy.NEW_PIECE,
            is_duplicate=False,
            reason="No matching source hash found",
        )
    return DuplicateCheckResult(
        policy=DuplicatePolicy.SKIP_DUPLICATE,
        is_duplicate=True,
        matching_session_id=existing.session_id,
        reason=f"Exact source file match: session {existing.session_id}",
    )


def check_work_duplicate(
    fingerprint: WorkFingerprint,
    existing: PieceMatch | None,
) -> DuplicateCheckResult:
    """A title/composer match always goes to a human, never an automatic skip."""
    if existing is None:
        return DuplicateCheckResult(
            policy=DuplicatePolicy.NEW_PIECE,
            is_duplicate=False,
            reason="No matching work fingerprint found",
        )
    return DuplicateCheckResult(
        policy=DuplicatePolicy.EXCEPTION_REVIEW,
        is_duplicate=True,
        matching_piece_id=existing.piece_id,
        reason=f'Possible duplicate of "{existing.title}" (work fingerprint match)',
    )


def resolve_deduplication_policy(
    source_result: DuplicateCheckResult,
    work_result: DuplicateCheckResult,
) -> DuplicateCheckResult:
    """Source match beats work match beats a clean NEW_PIECE."""
    if source_result.is_duplicate:
        return source_result
    if work_result.is_duplicate:
        return work_result
    return DuplicateCheckResult(
        policy=DuplicatePolicy.NEW_PIECE,
        is_duplicate=False,
        reason="No duplicates detected",
    )
