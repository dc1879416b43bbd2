from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    db_host: str = "host.docker.internal"
    db_port: int = 5432
    db_database: str = "score_intake"
    db_username: str = "score_intake"
    db_password: str = "secret"

    session_store: str = "postgres"

    max_job_attempts: int = 3
    job_poll_interval_seconds: int = 5

    pdf_engine: str = "pdfplumber"
    files_root: str = "/app/files"

    event_queue_size: int = 100
    event_terminal_history: int = 10_000

    analysis_single_part_max_pages: int = 2
    analysis_pages_per_part_divisor: int = 4
    analysis_confidence_short: int = 90
    analysis_confidence_hint: int = 60
    analysis_confidence_inconclusive: int = 50
    analysis_confidence_heuristic: int = 30
    analysis_confidence_failure: int = 0
