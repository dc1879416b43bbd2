from score_intake.fingerprint.fingerprint import (
    compute_part_fingerprint,
    compute_sha256,
    compute_work_fingerprint,
    normalize_for_fingerprint,
)
from score_intake.fingerprint.models import WorkFingerprint

__all__ = [
    "WorkFingerprint",
    "compute_part_fingerprint",
    "compute_sha256",
    "compute_work_fingerprint",
    "normalize_for_fingerprint",
]
