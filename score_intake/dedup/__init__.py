from score_intake.dedup.models import (
    DuplicateCheckResult,
    DuplicatePolicy,
    PieceMatch,
    SessionMatch,
)
from score_intake.dedup.policy import (
    check_source_duplicate,
    check_work_duplicate,
    resolve_deduplication_policy,
)

__all__ = [
    "DuplicateCheckResult",
    "DuplicatePolicy",
    "PieceMatch",
    "SessionMatch",
    "check_source_duplicate",
    "check_work_duplicate",
    "resolve_deduplication_policy",
]
