from score_intake.config.settings import Settings
from score_intake.database.connection import close_pool, init_pool
from score_intake.database.repositories.job_repository import JobRepository
from score_intake.events.bus import ProgressEventBus
from score_intake.logging.logger import Log
from score_intake.processor.processor import build_processor
from score_intake.review.factory import SessionStoreFactory
from score_intake.worker.job_runner import JobRunner
from score_intake.worker.worker import Worker


def main() -> None:
    """Entry point: settings -> pool -> bus and store -> processor -> worker loop."""
    settings = Settings()
    Log.configure(settings.log_level)
    init_pool(settings)
    bus = ProgressEventBus(settings.event_queue_size, settings.event_terminal_history)
    store = SessionStoreFactory.create(settings)

    try:
        processor = build_processor(settings, store, bus)
        job_repo = JobRepository(settings.max_job_attempts)
        job_runner = JobRunner(processor, job_repo, bus, settings)
        worker = Worker(job_repo, job_runner, settings)
        worker.run()
    finally:
        store.close()
        bus.close()
        close_pool()


if __name__ == "__main__":
    main()
