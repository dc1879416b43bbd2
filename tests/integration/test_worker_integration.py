from pathlib import Path

import pytest

from score_intake.config.settings import Settings
from score_intake.database.models import JobRecord
from score_intake.database.repositories.job_repository import JobRepository
from score_intake.database.repositories.upload_sessions_repository import (
    UploadSessionsRepository,
)
from score_intake.events.bus import ProgressEventBus
from score_intake.events.models import EventType
from score_intake.processor.processor import build_processor
from score_intake.review.models import SessionStatus
from score_intake.worker.job_runner import JobRunner


@pytest.mark.integration
class TestWorkerIntegration:
    def test_job_creates_pending_review_session(
        self,
        seed_job: JobRecord,
        files_root: Path,
        test_settings: Settings,
    ) -> None:
        store = UploadSessionsRepository()
        bus = ProgressEventBus()
        sub = bus.subscribe(session_id=seed_job.session_id)
        processor = build_processor(test_settings, store, bus, files_root=files_root)
        job_repo = JobRepository(max_attempts=test_settings.max_job_attempts)
        job = job_repo.find_by_id(seed_job.id)
        assert job is not None

        JobRunner(processor, job_repo, bus, test_settings).run(job)

        stored_job = job_repo.find_by_id(seed_job.id)
        assert stored_job is not None
        assert stored_job.status == "done"
        session = store.find_by_id(seed_job.session_id)
        assert session is not None
        assert session.status == SessionStatus.PENDING_REVIEW
        assert session.part_analysis.total_pages == 8
        events = list(sub)
        assert events[-1].type == EventType.COMPLETED
