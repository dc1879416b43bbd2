import os
import uuid
from collections.abc import Generator
from importlib import resources
from pathlib import Path
from typing import Any

import psycopg
import pytest
from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from score_intake.config.settings import Settings
from score_intake.database.connection import close_pool, get_connection, init_pool
from score_intake.database.models import JobRecord


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "score_intake_test")
    return Settings()


def _apply_schema() -> None:
    schema = resources.files("score_intake.database").joinpath("schema.sql").read_text()
    with get_connection() as conn:
        conn.execute(schema)
        conn.commit()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture(scope="session")
def integration_pool(test_settings: Settings) -> Generator[None, None, None]:
    try:
        init_pool(test_settings)
        _apply_schema()
    except Exception as e:
        close_pool()
        pytest.skip(f"PostgreSQL test DB not available: {e}. Set DB_* env to run.")
    try:
        yield
    finally:
        close_pool()


@pytest.fixture
def db_conn(integration_pool: None) -> Generator[psycopg.Connection[Any], None, None]:
    with get_connection() as conn:
        yield conn


@pytest.fixture
def integration_cleanup(
    integration_pool: None,
) -> Generator[list[tuple[str, str]], None, None]:
    cleanup: list[tuple[str, str]] = []
    yield cleanup
    if not cleanup:
        return
    statements = {
        "ingestion_jobs": "DELETE FROM ingestion_jobs WHERE id = %s",
        "music_files": "DELETE FROM music_files WHERE id = %s",
        "music_pieces": "DELETE FROM music_pieces WHERE id = %s",
        "upload_sessions": "DELETE FROM upload_sessions WHERE session_id = %s",
    }
    with get_connection() as conn:
        with conn.cursor() as cur:
            for table in statements:
                for name, row_id in cleanup:
                    if name == table:
                        cur.execute(statements[table], (row_id,))
        conn.commit()


@pytest.fixture
def files_root(tmp_path: Path) -> Path:
    return tmp_path


@pytest.fixture
def seed_job(
    db_conn: psycopg.Connection[Any],
    integration_cleanup: list[tuple[str, str]],
    files_root: Path,
    multi_page_pdf_bytes: bytes,
) -> JobRecord:
    session_id = str(uuid.uuid4())
    storage_key = f"uploads/{session_id}.pdf"
    path = files_root / storage_key
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(multi_page_pdf_bytes)

    with db_conn.cursor(row_factory=dict_row) as cur:
        cur.execute(
            """
            INSERT INTO ingestion_jobs
                (session_id, storage_key, file_name, mime_type, uploaded_by,
                 extracted_metadata, confidence_score, status, attempts)
            VALUES (%s, %s, %s, %s, %s, %s, %s, 'pending', 0)
            RETURNING id
            """,
            (
                session_id,
                storage_key,
                "suite.pdf",
                "application/pdf",
                "librarian-1",
                Jsonb({"title": f"Suite {session_id}", "composer": "Holst"}),
                70,
            ),
        )
        row = cur.fetchone()
        assert row is not None
    db_conn.commit()
    integration_cleanup.append(("ingestion_jobs", str(row["id"])))
    integration_cleanup.append(("upload_sessions", session_id))
    return JobRecord(
        id=row["id"],
        session_id=session_id,
        storage_key=storage_key,
        file_name="suite.pdf",
        mime_type="application/pdf",
        uploaded_by="librarian-1",
        status="pending",
        attempts=0,
    )
