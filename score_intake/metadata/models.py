from dataclasses import dataclass, field
from enum import Enum


class FileType(str, Enum):
    """Kind of document the extractor believes it was given."""

    FULL_SCORE = "FULL_SCORE"
    CONDUCTOR_SCORE = "CONDUCTOR_SCORE"
    PART = "PART"
    CONDENSED_SCORE = "CONDENSED_SCORE"


@dataclass(frozen=True)
class ExtractedPart:
    """One instrument part the extractor guessed is present in the document."""

    instrument: str | None = None
    part_name: str | None = None


@dataclass(frozen=True)
class ExtractedMetadata:
    """Validated metadata produced by the extractor for one upload."""

    title: str
    composer: str | None = None
    publisher: str | None = None
    instrument: str | None = None
    part_number: str | None = None
    confidence_score: int | None = None
    file_type: FileType | None = None
    is_multi_part: bool = False
    parts: list[ExtractedPart] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        """Serialize back to the extractor's JSON shape for storage."""
        return {
            "title": self.title,
            "composer": self.composer,
            "publisher": self.publisher,
            "instrument": self.instrument,
            "partNumber": self.part_number,
            "confidenceScore": self.confidence_score,
            "fileType": self.file_type.value if self.file_type is not None else None,
            "isMultiPart": self.is_multi_part,
            "parts": [
                {"instrument": p.instrument, "partName": p.part_name} for p in self.parts
            ],
        }
