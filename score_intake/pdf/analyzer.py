"""Multi-part structure estimation for uploaded scores.

Only the page count is read from the document. Part boundaries are derived from
the extractor's hint when it reports several parts, otherwise from page count
alone, and the confidence reflects how weak that signal is.
"""

import math

from score_intake.config.settings import Settings
from score_intake.exceptions import PdfAnalysisError
from score_intake.logging.logger import Log
from score_intake.metadata.models import ExtractedMetadata
from score_intake.pdf.base import BasePageCounter
from score_intake.pdf.models import AnalysisThresholds, PartAnalysis, PartInfo
from score_intake.pdf.pdfplumber_adapter import PdfPlumberAdapter

UNKNOWN_INSTRUMENT = "Unknown"
_MAX_ERROR_SUMMARY = 200


def thresholds_from_settings(settings: Settings) -> AnalysisThresholds:
    return AnalysisThresholds(
        single_part_max_pages=settings.analysis_single_part_max_pages,
        pages_per_part_divisor=settings.analysis_pages_per_part_divisor,
        confidence_short=settings.analysis_confidence_short,
        confidence_hint=settings.analysis_confidence_hint,
        confidence_inconclusive=settings.analysis_confidence_inconclusive,
        confidence_heuristic=settings.analysis_confidence_heuristic,
        confidence_failure=settings.analysis_confidence_failure,
    )


def split_pages(
    total_pages: int,
    labels: list[tuple[str, str]],
) -> list[PartInfo]:
    """Split pages into ceil-sized ranges in label order.

    The last emitted part absorbs the remainder. Labels whose first page would
    fall past the end of the document get no range, so the result always
    partitions [0, total_pages - 1] without gaps or overlaps.
    """
    if total_pages <= 0 or not labels:
        return []
    pages_per_part = math.ceil(total_pages / len(labels))
    parts: list[PartInfo] = []
    for index, (instrument, part_name) in enumerate(labels):
        start = index * pages_per_part
        if start > total_pages - 1:
            break
        end = min(start + pages_per_part - 1, total_pages - 1)
        parts.append(
            PartInfo(
                page_range=(start, end),
                instrument_name=instrument,
                part_name=part_name,
                estimated_part_number=index + 1,
            )
        )
    last = parts[-1]
    parts[-1] = PartInfo(
        page_range=(last.page_range[0], total_pages - 1),
        instrument_name=last.instrument_name,
        part_name=last.part_name,
        estimated_part_number=last.estimated_part_number,
    )
    return parts


class PdfPartAnalyzer:
    """Estimates whether a PDF contains several instrument parts."""

    def __init__(
        self,
        page_counter: BasePageCounter,
        thresholds: AnalysisThresholds | None = None,
    ) -> None:
        self._page_counter = page_counter
        self._thresholds = thresholds or AnalysisThresholds()

    def analyze(self, pdf_bytes: bytes, hint: ExtractedMetadata | None = None) -> PartAnalysis:
        """Analyze a PDF. Never raises for unreadable documents.

        A document that cannot be opened yields confidence 0 so the session still
        reaches review instead of failing the ingestion job.
        """
        try:
            total_pages = self._page_counter.count_pages(pdf_bytes)
        except PdfAnalysisError as exc:
            summary = _sanitize(exc)
            Log.error("PDF structural analysis failed", error_type=type(exc).__name__)
            return PartAnalysis(
                is_multi_part=False,
                total_pages=0,
                confidence=self._thresholds.confidence_failure,
                notes=f"Error analyzing PDF: {summary}",
            )

        Log.info(
            "Analyzing PDF for multi-part structure",
            total_pages=total_pages,
            has_hint_parts=bool(hint and hint.parts),
        )

        result = self._from_hint(total_pages, hint)
        if result is None:
            result = self._from_page_count(total_pages)

        Log.info(
            "PDF structural analysis complete",
            total_pages=total_pages,
            is_multi_part=result.is_multi_part,
            parts=len(result.estimated_parts),
            confidence=result.confidence,
        )
        return result

    def _from_hint(
        self,
        total_pages: int,
        hint: ExtractedMetadata | None,
    ) -> PartAnalysis | None:
        if hint is None or not hint.is_multi_part or not hint.parts or total_pages <= 0:
            return None
        labels = [
            (part.instrument or UNKNOWN_INSTRUMENT, part.part_name or f"Part {i + 1}")
            for i, part in enumerate(hint.parts)
        ]
        return PartAnalysis(
            is_multi_part=True,
            total_pages=total_pages,
            estimated_parts=split_pages(total_pages, labels),
            confidence=self._thresholds.confidence_hint,
            notes="Multi-part structure taken from extracted metadata. "
            "Page boundaries are estimates.",
        )

    def _from_page_count(self, total_pages: int) -> PartAnalysis:
        t = self._thresholds
        if total_pages <= t.single_part_max_pages:
            return PartAnalysis(
                is_multi_part=False,
                total_pages=total_pages,
                confidence=t.confidence_short,
                notes="Single-part detected (few pages).",
            )

        candidates = min(math.ceil(total_pages / t.pages_per_part_divisor), total_pages)
        if candidates > 1 and total_pages >= 4:
            labels = [(UNKNOWN_INSTRUMENT, f"Part {i + 1}") for i in range(candidates)]
            return PartAnalysis(
                is_multi_part=True,
                total_pages=total_pages,
                estimated_parts=split_pages(total_pages, labels),
                confidence=t.confidence_heuristic,
                notes=f"Detected {candidates} potential parts based on page count "
                f"({total_pages} pages). Manual verification recommended.",
            )

        return PartAnalysis(
            is_multi_part=False,
            total_pages=total_pages,
            confidence=t.confidence_inconclusive,
            notes="Structure analysis inconclusive.",
        )


def _sanitize(exc: Exception) -> str:
    lines = str(exc).strip().splitlines()
    message = lines[0] if lines else ""
    summary = f"{type(exc).__name__}: {message}" if message else type(exc).__name__
    return summary[:_MAX_ERROR_SUMMARY]


def analyze_pdf_parts(
    pdf_bytes: bytes,
    hint: ExtractedMetadata | None = None,
    page_counter: BasePageCounter | None = None,
    thresholds: AnalysisThresholds | None = None,
) -> PartAnalysis:
    """One-shot analysis with the pdfplumber counter unless another is given."""
    counter = page_counter if page_counter is not None else PdfPlumberAdapter()
    return PdfPartAnalyzer(counter, thresholds).analyze(pdf_bytes, hint)
