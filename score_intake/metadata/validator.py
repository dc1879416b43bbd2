"""Validates the extractor's raw JSON once, at the ingestion boundary."""

from typing import Any

from score_intake.exceptions import ValidationError
from score_intake.metadata.models import ExtractedMetadata, ExtractedPart, FileType

_MAX_PARTS = 100
_VALID_FILE_TYPES = frozenset(t.value for t in FileType)


def validate_and_build(data: Any) -> ExtractedMetadata:
    """Validate raw extractor output and build an ExtractedMetadata.

    Raises:
        ValidationError: on any validation failure.
    """
    if not isinstance(data, dict):
        raise ValidationError("Extracted metadata must be an object")
    title = data.get("title")
    if not isinstance(title, str) or not title.strip():
        raise ValidationError("'title' must be a non-empty string")
    parts = _build_parts(data.get("parts"))
    return ExtractedMetadata(
        title=title.strip(),
        composer=_optional_string(data, "composer"),
        publisher=_optional_string(data, "publisher"),
        instrument=_optional_string(data, "instrument"),
        part_number=_optional_string(data, "partNumber"),
        confidence_score=_build_confidence(data.get("confidenceScore")),
        file_type=_build_file_type(data.get("fileType")),
        is_multi_part=_build_is_multi_part(data.get("isMultiPart")),
        parts=parts,
    )


def _optional_string(data: dict[str, Any], key: str) -> str | None:
    raw = data.get(key)
    if raw is None:
        return None
    if not isinstance(raw, str):
        raise ValidationError(f"'{key}' must be a string or null")
    stripped = raw.strip()
    return stripped or None


def _build_confidence(raw: Any) -> int | None:
    if raw is None:
        return None
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise ValidationError("'confidenceScore' must be a number or null")
    if not 0 <= raw <= 100:
        raise ValidationError(f"'confidenceScore' must be between 0 and 100, got {raw}")
    return round(raw)


def _build_file_type(raw: Any) -> FileType | None:
    if raw is None:
        return None
    if not isinstance(raw, str) or raw not in _VALID_FILE_TYPES:
        raise ValidationError(
            f"'fileType' must be one of {sorted(_VALID_FILE_TYPES)}, got {raw!r}"
        )
    return FileType(raw)


def _build_is_multi_part(raw: Any) -> bool:
    if raw is None:
        return False
    if not isinstance(raw, bool):
        raise ValidationError("'isMultiPart' must be a boolean or null")
    return raw


def _build_parts(raw: Any) -> list[ExtractedPart]:
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ValidationError("'parts' must be a list or null")
    if len(raw) > _MAX_PARTS:
        raise ValidationError(f"Too many parts: {len(raw)} (max {_MAX_PARTS})")
    return [_build_part(item, i) for i, item in enumerate(raw)]


def _build_part(raw: Any, index: int) -> ExtractedPart:
    if not isinstance(raw, dict):
        raise ValidationError(f"Part at index {index} must be an object")
    try:
        instrument = _optional_string(raw, "instrument")
        part_name = _optional_string(raw, "partName")
    except ValidationError as exc:
        raise ValidationError(f"Part at index {index}: {exc}") from exc
    return ExtractedPart(instrument=instrument, part_name=part_name)
