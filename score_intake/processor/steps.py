from score_intake.dedup.policy import (
    check_source_duplicate,
    check_work_duplicate,
    resolve_deduplication_policy,
)
from score_intake.fingerprint.fingerprint import compute_sha256, compute_work_fingerprint
from score_intake.logging.logger import Log
from score_intake.metadata.validator import validate_and_build
from score_intake.pdf.analyzer import PdfPartAnalyzer
from score_intake.processor.file_loader import FileLoader
from score_intake.processor.pipeline import PipelineContext, PipelineStep
from score_intake.review.models import NewUploadSession
from score_intake.review.service import ReviewService
from score_intake.review.store import BaseSessionStore


class LoadUploadStep(PipelineStep):
    name = "loading"
    percent = 10
    message = "Loading uploaded file"

    def __init__(self, file_loader: FileLoader) -> None:
        self._file_loader = file_loader

    def run(self, context: PipelineContext) -> PipelineContext:
        context.raw_bytes = self._file_loader.load(context.job.storage_key)
        Log.info("Loaded upload", job_id=context.job.id, size_bytes=len(context.raw_bytes))
        return context


class ValidateMetadataStep(PipelineStep):
    name = "validating"
    percent = 25
    message = "Validating extracted metadata"

    def run(self, context: PipelineContext) -> PipelineContext:
        context.metadata = validate_and_build(context.job.extracted_metadata)
        return context


class FingerprintStep(PipelineStep):
    name = "fingerprinting"
    percent = 40
    message = "Computing fingerprints"

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.metadata is None:
            raise ValueError("PipelineContext.metadata must be set before fingerprinting")
        context.source_sha256 = compute_sha256(context.raw_bytes)
        context.work_fingerprint = compute_work_fingerprint(
            context.metadata.title, context.metadata.composer
        )
        return context


class DeduplicateStep(PipelineStep):
    name = "deduplicating"
    percent = 55
    message = "Checking for duplicates"

    def __init__(self, store: BaseSessionStore) -> None:
        self._store = store

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.work_fingerprint is None:
            raise ValueError("PipelineContext.work_fingerprint must be set before deduplication")
        source_result = check_source_duplicate(
            context.source_sha256,
            self._store.find_by_source_sha256(context.source_sha256),
        )
        work_result = check_work_duplicate(
            context.work_fingerprint,
            self._store.find_piece_by_work_fingerprint(context.work_fingerprint.hash),
        )
        context.duplicate = resolve_deduplication_policy(source_result, work_result)
        Log.info(
            "Duplicate policy resolved",
            job_id=context.job.id,
            policy=context.duplicate.policy.value,
        )
        return context


class AnalyzeStructureStep(PipelineStep):
    name = "analyzing"
    percent = 70
    message = "Analyzing PDF structure"

    def __init__(self, analyzer: PdfPartAnalyzer) -> None:
        self._analyzer = analyzer

    def run(self, context: PipelineContext) -> PipelineContext:
        context.part_analysis = self._analyzer.analyze(context.raw_bytes, context.metadata)
        return context


class PersistSessionStep(PipelineStep):
    name = "saving"
    percent = 90
    message = "Creating review session"

    def __init__(self, review_service: ReviewService) -> None:
        self._review_service = review_service

    def run(self, context: PipelineContext) -> PipelineContext:
        if context.metadata is None or context.duplicate is None or context.part_analysis is None:
            raise ValueError("PipelineContext must be fully analyzed before persisting")
        job = context.job
        confidence = job.confidence_score
        if confidence is None:
            confidence = context.metadata.confidence_score or 0
        context.session = self._review_service.create_session(
            NewUploadSession(
                session_id=job.session_id,
                source_sha256=context.source_sha256,
                file_name=job.file_name,
                mime_type=job.mime_type,
                uploaded_by=job.uploaded_by,
                extracted_metadata=context.metadata,
                confidence_score=confidence,
                duplicate_policy=context.duplicate.policy,
                matching_piece_id=context.duplicate.matching_piece_id,
                part_analysis=context.part_analysis,
                temp_files=[job.storage_key],
            )
        )
        return context
