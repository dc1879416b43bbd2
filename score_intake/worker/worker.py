import time

from score_intake.config.settings import Settings
from score_intake.database.connection import get_connection
from score_intake.database.models import JobRecord
from score_intake.database.repositories.job_repository import JobRepository
from score_intake.logging.logger import Log
from score_intake.worker.job_runner import JobRunner


class Worker:
    """Poll loop: claim -> run -> sleep when idle."""

    def __init__(
        self,
        job_repo: JobRepository,
        job_runner: JobRunner,
        settings: Settings,
    ) -> None:
        self._job_repo = job_repo
        self._job_runner = job_runner
        self._settings = settings

    def run(self, max_jobs: int | None = None) -> None:
        """Poll until interrupted, or until max_jobs jobs have run."""
        Log.info("Worker started, polling for ingestion jobs")
        jobs_done = 0
        try:
            while max_jobs is None or jobs_done < max_jobs:
                job = self._try_claim_job()
                if job is None:
                    Log.debug("No jobs available, sleeping")
                    time.sleep(self._settings.job_poll_interval_seconds)
                    continue
                self._job_runner.run(job)
                jobs_done += 1
        except KeyboardInterrupt:
            Log.info("Worker shutting down gracefully", jobs_done=jobs_done)

    def _try_claim_job(self) -> JobRecord | None:
        """Claim the next pending job; database errors are logged and retried later."""
        try:
            with get_connection() as conn:
                return self._job_repo.claim_next_job(conn)
        except Exception as exc:
            Log.warning("Database error, will retry", error=str(exc))
            return None
