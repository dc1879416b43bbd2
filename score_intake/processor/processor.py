from dataclasses import dataclass
from pathlib import Path

from score_intake.config.settings import Settings
from score_intake.database.models import JobRecord
from score_intake.events.bus import ProgressEventBus
from score_intake.logging.logger import Log
from score_intake.pdf.analyzer import PdfPartAnalyzer, thresholds_from_settings
from score_intake.pdf.factory import PageCounterFactory
from score_intake.processor.file_loader import FileLoader
from score_intake.processor.pipeline import PipelineContext, PipelineStep
from score_intake.processor.steps import (
    AnalyzeStructureStep,
    DeduplicateStep,
    FingerprintStep,
    LoadUploadStep,
    PersistSessionStep,
    ValidateMetadataStep,
)
from score_intake.review.models import UploadSession
from score_intake.review.service import ReviewService
from score_intake.review.store import BaseSessionStore
from score_intake.storage.cleanup import TempFileCleaner
from score_intake.storage.local_storage import LocalTempFileStorage

STATUS_PENDING_REVIEW = "pending_review"
STATUS_SKIPPED_DUPLICATE = "skipped_duplicate"


@dataclass(frozen=True)
class IngestionResult:
    """Summary of one ingestion job, sent as the payload of the completed event."""

    session_id: str | None
    status: str
    policy: str
    matching_session_id: str | None = None
    matching_piece_id: str | None = None
    parts_estimated: int = 0
    confidence: int | None = None

    def to_dict(self) -> dict[str, object]:
        return {
            "sessionId": self.session_id,
            "status": self.status,
            "policy": self.policy,
            "matchingSessionId": self.matching_session_id,
            "matchingPieceId": self.matching_piece_id,
            "partsEstimated": self.parts_estimated,
            "confidence": self.confidence,
        }


def _result_for_session(session: UploadSession) -> IngestionResult:
    return IngestionResult(
        session_id=session.session_id,
        status=STATUS_PENDING_REVIEW,
        policy=session.duplicate_policy.value,
        matching_piece_id=session.matching_piece_id,
        parts_estimated=len(session.part_analysis.estimated_parts),
        confidence=session.part_analysis.confidence,
    )


class IngestionProcessor:
    """Runs the ingestion steps for one job and reports progress on the bus.

    Pipeline: load -> validate -> fingerprint -> deduplicate -> analyze -> save.
    An exact source duplicate stops after deduplication without creating a session.
    """

    def __init__(
        self,
        steps: list[PipelineStep],
        store: BaseSessionStore,
        bus: ProgressEventBus,
    ) -> None:
        self._steps = steps
        self._store = store
        self._bus = bus

    def process(self, job: JobRecord) -> IngestionResult:
        job_key = str(job.id)
        Log.info("Processing ingestion job", job_id=job.id, session_id=job.session_id)

        # A retry after the session was saved must not dedup against itself.
        existing = self._store.find_by_id(job.session_id)
        if existing is not None:
            Log.info("Session already created by an earlier attempt", job_id=job.id)
            return _result_for_session(existing)

        context = PipelineContext(job=job)
        for step in self._steps:
            if context.skipped:
                break
            self._bus.publish_progress(
                job_key, job.session_id, step.name, step.percent, step.message
            )
            context = step.run(context)

        duplicate = context.duplicate
        if context.skipped and duplicate is not None:
            Log.info(
                "Upload skipped as exact duplicate",
                job_id=job.id,
                matching_session_id=duplicate.matching_session_id,
            )
            return IngestionResult(
                session_id=None,
                status=STATUS_SKIPPED_DUPLICATE,
                policy=duplicate.policy.value,
                matching_session_id=duplicate.matching_session_id,
            )

        if context.session is None:
            raise RuntimeError(f"Pipeline finished without a session for job {job.id}")
        return _result_for_session(context.session)


def build_processor(
    settings: Settings,
    store: BaseSessionStore,
    bus: ProgressEventBus,
    files_root: Path | None = None,
) -> IngestionProcessor:
    """Build an IngestionProcessor with all required adapters."""
    root = files_root if files_root is not None else Path(settings.files_root)
    analyzer = PdfPartAnalyzer(
        PageCounterFactory.create(settings),
        thresholds_from_settings(settings),
    )
    review_service = ReviewService(
        store,
        TempFileCleaner(LocalTempFileStorage(root), store),
    )
    steps: list[PipelineStep] = [
        LoadUploadStep(FileLoader(files_root=root)),
        ValidateMetadataStep(),
        FingerprintStep(),
        DeduplicateStep(store),
        AnalyzeStructureStep(analyzer),
        PersistSessionStep(review_service),
    ]
    return IngestionProcessor(steps, store, bus)
