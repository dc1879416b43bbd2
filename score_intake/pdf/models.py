from dataclasses import dataclass, field


@dataclass(frozen=True)
class PartInfo:
    """Estimated page span of one instrument part (0-indexed, inclusive)."""

    page_range: tuple[int, int]
    instrument_name: str
    part_name: str
    estimated_part_number: int

    def to_dict(self) -> dict[str, object]:
        return {
            "pageRange": list(self.page_range),
            "instrumentName": self.instrument_name,
            "partName": self.part_name,
            "estimatedPartNumber": self.estimated_part_number,
        }


@dataclass(frozen=True)
class PartAnalysis:
    """Structural estimate of whether a PDF holds several parts."""

    is_multi_part: bool
    total_pages: int
    confidence: int
    notes: str
    estimated_parts: list[PartInfo] = field(default_factory=list)

    def to_dict(self) -> dict[str, object]:
        return {
            "isMultiPart": self.is_multi_part,
            "totalPages": self.total_pages,
            "estimatedParts": [p.to_dict() for p in self.estimated_parts],
            "confidence": self.confidence,
            "notes": self.notes,
        }


@dataclass(frozen=True)
class AnalysisThresholds:
    """Empirical constants of the structural heuristic.

    Overridable through Settings; the defaults are the values librarians have
    been reviewing against.
    """

    single_part_max_pages: int = 2
    pages_per_part_divisor: int = 4
    confidence_short: int = 90
    confidence_hint: int = 60
    confidence_inconclusive: int = 50
    confidence_heuristic: int = 30
    confidence_failure: int = 0


def part_analysis_from_dict(data: dict[str, object]) -> PartAnalysis:
    """Rebuild a PartAnalysis from the dict produced by PartAnalysis.to_dict."""
    raw_parts = data.get("estimatedParts") or []
    parts = [
        PartInfo(
            page_range=(int(p["pageRange"][0]), int(p["pageRange"][1])),
            instrument_name=str(p["instrumentName"]),
            part_name=str(p["partName"]),
            estimated_part_number=int(p["estimatedPartNumber"]),
        )
        for p in raw_parts  # type: ignore[union-attr]
    ]
    return PartAnalysis(
        is_multi_part=bool(data.get("isMultiPart")),
        total_pages=int(data.get("totalPages") or 0),  # type: ignore[arg-type]
        confidence=int(data.get("confidence") or 0),  # type: ignore[arg-type]
        notes=str(data.get("notes") or ""),
        estimated_parts=parts,
    )
