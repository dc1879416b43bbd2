from abc import ABC, abstractmethod
from dataclasses import dataclass

from score_intake.database.models import JobRecord
from score_intake.dedup.models import DuplicateCheckResult, DuplicatePolicy
from score_intake.fingerprint.models import WorkFingerprint
from score_intake.metadata.models import ExtractedMetadata
from score_intake.pdf.models import PartAnalysis
from score_intake.review.models import UploadSession


@dataclass(slots=True)
class PipelineContext:
    job: JobRecord
    raw_bytes: bytes = b""
    metadata: ExtractedMetadata | None = None
    source_sha256: str = ""
    work_fingerprint: WorkFingerprint | None = None
    duplicate: DuplicateCheckResult | None = None
    part_analysis: PartAnalysis | None = None
    session: UploadSession | None = None

    @property
    def skipped(self) -> bool:
        return (
            self.duplicate is not None
            and self.duplicate.policy == DuplicatePolicy.SKIP_DUPLICATE
        )


class PipelineStep(ABC):
    """One stage of ingestion. name/percent/message feed the progress events."""

    name: str = ""
    percent: int = 0
    message: str = ""

    @abstractmethod
    def run(self, context: PipelineContext) -> PipelineContext:
        raise NotImplementedError
