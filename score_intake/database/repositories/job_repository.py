from typing import Any

import psycopg
from psycopg.rows import dict_row

from score_intake.database.connection import get_connection
from score_intake.database.models import JobRecord

_JOB_COLUMNS = """
    id, session_id, storage_key, file_name, mime_type, uploaded_by,
    extracted_metadata, confidence_score, status, attempts, error_message,
    locked_at, created_at, updated_at
"""


def _to_record(row: dict[str, Any]) -> JobRecord:
    return JobRecord(
        id=row["id"],
        session_id=row["session_id"],
        storage_key=row["storage_key"],
        file_name=row["file_name"],
        mime_type=row["mime_type"],
        uploaded_by=row["uploaded_by"],
        status=row["status"],
        attempts=row["attempts"],
        extracted_metadata=row["extracted_metadata"],
        confidence_score=row["confidence_score"],
        error_message=row["error_message"],
        locked_at=row["locked_at"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class JobRepository:
    """Database operations for the ingestion_jobs table."""

    def __init__(self, max_attempts: int) -> None:
        self._max_attempts = max_attempts

    def claim_next_job(self, conn: psycopg.Connection[Any]) -> JobRecord | None:
        """Claim the oldest pending job using SELECT FOR UPDATE SKIP LOCKED."""
        with conn.cursor(row_factory=dict_row) as cur:
            cur.execute(
                f"""
                SELECT {_JOB_COLUMNS}
                FROM ingestion_jobs
                WHERE status = 'pending'
                  AND attempts < %s
                ORDER BY created_at
                LIMIT 1
                FOR UPDATE SKIP LOCKED
                """,
                (self._max_attempts,),
            )
            row = cur.fetchone()

        if row is None:
            conn.commit()
            return None

        conn.execute(
            """
            UPDATE ingestion_jobs
            SET status = 'processing', locked_at = NOW(), updated_at = NOW()
            WHERE id = %s
            """,
            (row["id"],),
        )
        conn.commit()

        record = _to_record(row)
        record.status = "processing"
        return record

    def mark_done(self, job_id: int) -> None:
        with get_connection() as conn:
            conn.execute(
                """
                UPDATE ingestion_jobs
                SET status = 'done', error_message = NULL, locked_at = NULL,
                    updated_at = NOW()
                WHERE id = %s
                """,
                (job_id,),
            )
            conn.commit()

    def mark_failed(self, job_id: int, error: str) -> None:
        """Mark a job as permanently failed."""
        with get_connection() as conn:
            conn.execute(
                """
                UPDATE ingestion_jobs
                SET status = 'failed', attempts = attempts + 1, error_message = %s,
                    locked_at = NULL, updated_at = NOW()
                WHERE id = %s
                """,
                (error, job_id),
            )
            conn.commit()

    def increment_attempts(self, job_id: int, error: str | None = None) -> None:
        """Record a failed attempt and return the job to pending."""
        with get_connection() as conn:
            conn.execute(
                """
                UPDATE ingestion_jobs
                SET attempts = attempts + 1, status = 'pending', error_message = %s,
                    locked_at = NULL, updated_at = NOW()
                WHERE id = %s
                """,
                (error, job_id),
            )
            conn.commit()

    def find_by_id(self, job_id: int) -> JobRecord | None:
        """Find a job by ID. Useful for tests."""
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"SELECT {_JOB_COLUMNS} FROM ingestion_jobs WHERE id = %s",
                    (job_id,),
                )
                row = cur.fetchone()

        if row is None:
            return None
        return _to_record(row)
