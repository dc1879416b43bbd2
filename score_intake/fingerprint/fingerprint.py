"""Deterministic hashing of source bytes, work identity and part identity."""

import hashlib
import re

from score_intake.exceptions import ValidationError
from score_intake.fingerprint.models import WorkFingerprint

NO_CHAIR_TOKEN = "no-chair"
_SHORT_HASH_LENGTH = 16

_PUNCTUATION = re.compile(r"[^\w\s]")
_WHITESPACE = re.compile(r"\s+")


def normalize_for_fingerprint(value: str) -> str:
    """Lowercase, strip punctuation, collapse whitespace and trim."""
    if not isinstance(value, str):
        raise ValidationError(f"Expected a string, got {type(value).__name__}")
    stripped = _PUNCTUATION.sub("", value.lower())
    return _WHITESPACE.sub(" ", stripped).strip()


def compute_sha256(data: bytes | bytearray | memoryview) -> str:
    """Return the 64-char lowercase hex SHA-256 of raw file bytes."""
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise ValidationError(
            f"compute_sha256 expects bytes, got {type(data).__name__}"
        )
    return hashlib.sha256(data).hexdigest()


def compute_work_fingerprint(title: str, composer: str | None = None) -> WorkFingerprint:
    """Fingerprint a work by its normalized title and composer.

    Two uploads that differ only in case, punctuation or spacing of the title or
    composer produce the same hash. A missing composer normalizes to "".
    """
    if not isinstance(title, str):
        raise ValidationError(f"'title' must be a string, got {type(title).__name__}")
    if composer is not None and not isinstance(composer, str):
        raise ValidationError(
            f"'composer' must be a string or None, got {type(composer).__name__}"
        )
    normalized_title = normalize_for_fingerprint(title)
    normalized_composer = normalize_for_fingerprint(composer or "")
    combined = f"{normalized_title}::{normalized_composer}"
    return WorkFingerprint(
        normalized_title=normalized_title,
        normalized_composer=normalized_composer,
        hash=_short_hash(combined),
    )


def compute_part_fingerprint(
    session_id: str,
    canonical_instrument: str,
    chair: str | None,
    page_start: int,
    page_end: int,
) -> str:
    """Stable identity of one instrument part within an upload session.

    Used to make part-record creation idempotent under job retries.
    """
    if not isinstance(session_id, str) or not session_id:
        raise ValidationError("'session_id' must be a non-empty string")
    if chair is not None and not isinstance(chair, str):
        raise ValidationError(f"'chair' must be a string or None, got {type(chair).__name__}")
    _require_page(page_start, "page_start")
    _require_page(page_end, "page_end")
    if page_end < page_start:
        raise ValidationError(f"page_end ({page_end}) is before page_start ({page_start})")

    tokens = [
        session_id,
        normalize_for_fingerprint(canonical_instrument),
        NO_CHAIR_TOKEN if chair is None else chair,
        f"p{page_start}-{page_end}",
    ]
    return _short_hash("::".join(tokens))


def _require_page(value: object, name: str) -> None:
    # bool is an int subclass; a page number of True is a caller bug
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"'{name}' must be an integer, got {type(value).__name__}")
    if value < 0:
        raise ValidationError(f"'{name}' must be >= 0, got {value}")


def _short_hash(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()[:_SHORT_HASH_LENGTH]
