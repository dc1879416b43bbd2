from score_intake.config.settings import Settings
from score_intake.database.models import JobRecord
from score_intake.database.repositories.job_repository import JobRepository
from score_intake.events.bus import ProgressEventBus
from score_intake.exceptions import InvalidStorageKeyError, ValidationError
from score_intake.logging.logger import Log
from score_intake.processor.processor import IngestionProcessor

# Failures that fail the same way on every retry.
TERMINAL_ERRORS: tuple[type[Exception], ...] = (
    ValidationError,
    InvalidStorageKeyError,
    FileNotFoundError,
)


def _failure_reason(exc: Exception) -> str:
    message = str(exc).strip().splitlines()
    return f"{type(exc).__name__}: {message[0]}" if message else type(exc).__name__


def is_terminal(exc: Exception) -> bool:
    return isinstance(exc, TERMINAL_ERRORS)


class JobRunner:
    """Run one job, catch exceptions, apply retry logic and publish the outcome."""

    def __init__(
        self,
        processor: IngestionProcessor,
        job_repo: JobRepository,
        bus: ProgressEventBus,
        settings: Settings,
    ) -> None:
        self._processor = processor
        self._job_repo = job_repo
        self._bus = bus
        self._settings = settings

    def run(self, job: JobRecord) -> None:
        """Execute a single job with error handling."""
        Log.info("Running job", job_id=job.id, attempt=job.attempts + 1)
        try:
            result = self._processor.process(job)
            self._job_repo.mark_done(job.id)
        except Exception as exc:
            self._handle_failure(job, exc)
            return

        self._bus.publish_completed(str(job.id), job.session_id, result.to_dict())
        Log.info("Job completed successfully", job_id=job.id, status=result.status)

    def _handle_failure(self, job: JobRecord, exc: Exception) -> None:
        """Back to pending below max attempts; permanently failed at max or on a terminal error."""
        reason = _failure_reason(exc)
        terminal = is_terminal(exc)
        Log.error("Job failed", job_id=job.id, error=reason, terminal=terminal)
        if terminal or job.attempts + 1 >= self._settings.max_job_attempts:
            self._job_repo.mark_failed(job.id, reason)
            self._bus.publish_failed(str(job.id), job.session_id, reason)
            Log.error("Job permanently failed", job_id=job.id, attempts=job.attempts + 1)
        else:
            self._job_repo.increment_attempts(job.id, reason)
            Log.warning("Job will be retried", job_id=job.id, attempts=job.attempts + 1)
