from datetime import datetime
from typing import Any

from psycopg import errors
from psycopg.rows import dict_row
from psycopg.types.json import Jsonb

from score_intake.database.connection import get_connection
from score_intake.dedup.models import DuplicatePolicy, PieceMatch, SessionMatch
from score_intake.metadata.validator import validate_and_build
from score_intake.pdf.models import part_analysis_from_dict
from score_intake.review.models import SessionStatus, UploadSession
from score_intake.review.store import BaseSessionStore

_SESSION_COLUMNS = """
    session_id, source_sha256, file_name, mime_type, uploaded_by,
    extracted_metadata, confidence_score, status, duplicate_policy,
    matching_piece_id, part_analysis, temp_files, reviewed_by, reviewed_at,
    routing_decision, created_at, updated_at
"""


def _to_session(row: dict[str, Any]) -> UploadSession:
    return UploadSession(
        session_id=row["session_id"],
        source_sha256=row["source_sha256"],
        file_name=row["file_name"],
        mime_type=row["mime_type"],
        uploaded_by=row["uploaded_by"],
        extracted_metadata=validate_and_build(row["extracted_metadata"]),
        confidence_score=row["confidence_score"],
        status=SessionStatus(row["status"]),
        duplicate_policy=DuplicatePolicy(row["duplicate_policy"]),
        matching_piece_id=row["matching_piece_id"],
        part_analysis=part_analysis_from_dict(row["part_analysis"]),
        temp_files=list(row["temp_files"] or []),
        reviewed_by=row["reviewed_by"],
        reviewed_at=row["reviewed_at"],
        routing_decision=row["routing_decision"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


class UploadSessionsRepository(BaseSessionStore):
    """PostgreSQL-backed session store over upload_sessions and the library tables."""

    def create(self, session: UploadSession) -> UploadSession:
        try:
            with get_connection() as conn:
                with conn.cursor(row_factory=dict_row) as cur:
                    cur.execute(
                        f"""
                        INSERT INTO upload_sessions (
                            session_id, source_sha256, file_name, mime_type,
                            uploaded_by, extracted_metadata, confidence_score,
                            status, duplicate_policy, matching_piece_id,
                            part_analysis, temp_files, created_at, updated_at
                        )
                        VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                        RETURNING {_SESSION_COLUMNS}
                        """,
                        (
                            session.session_id,
                            session.source_sha256,
                            session.file_name,
                            session.mime_type,
                            session.uploaded_by,
                            Jsonb(session.extracted_metadata.to_dict()),
                            session.confidence_score,
                            session.status.value,
                            session.duplicate_policy.value,
                            session.matching_piece_id,
                            Jsonb(session.part_analysis.to_dict()),
                            Jsonb(list(session.temp_files)),
                            session.created_at,
                            session.updated_at,
                        ),
                    )
                    row = cur.fetchone()
                conn.commit()
        except errors.UniqueViolation as exc:
            raise ValueError(f"Session {session.session_id} already exists") from exc

        if row is None:
            raise RuntimeError(f"Insert of session {session.session_id} returned no row")
        return _to_session(row)

    def find_by_id(self, session_id: str) -> UploadSession | None:
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"SELECT {_SESSION_COLUMNS} FROM upload_sessions WHERE session_id = %s",
                    (session_id,),
                )
                row = cur.fetchone()

        if row is None:
            return None
        return _to_session(row)

    def find_by_source_sha256(self, source_sha256: str) -> SessionMatch | None:
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    SELECT session_id, status
                    FROM upload_sessions
                    WHERE source_sha256 = %s
                    ORDER BY created_at
                    LIMIT 1
                    """,
                    (source_sha256,),
                )
                row = cur.fetchone()

        if row is None:
            return None
        return SessionMatch(session_id=row[0], status=row[1])

    def find_piece_by_work_fingerprint(self, fingerprint_hash: str) -> PieceMatch | None:
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    """
                    SELECT id, title
                    FROM music_pieces
                    WHERE work_fingerprint = %s
                    ORDER BY id
                    LIMIT 1
                    """,
                    (fingerprint_hash,),
                )
                row = cur.fetchone()

        if row is None:
            return None
        return PieceMatch(piece_id=row[0], title=row[1])

    def has_library_record(self, session_id: str) -> bool:
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    "SELECT EXISTS (SELECT 1 FROM music_files WHERE origin_session_id = %s)",
                    (session_id,),
                )
                row = cur.fetchone()
        return bool(row and row[0])

    def committed_storage_keys(self, keys: list[str]) -> set[str]:
        if not keys:
            return set()
        with get_connection() as conn:
            with conn.cursor() as cur:
                cur.execute(
                    "SELECT DISTINCT storage_key FROM music_files WHERE storage_key = ANY(%s)",
                    (list(keys),),
                )
                rows = cur.fetchall()
        return {row[0] for row in rows}

    def transition(
        self,
        session_id: str,
        expected: SessionStatus,
        target: SessionStatus,
        *,
        audit_entry: str,
        now: datetime,
        reviewed_by: str | None = None,
    ) -> UploadSession | None:
        """Compare-and-transition in one UPDATE; no row returned means the pre-state moved."""
        reviewed_at = now if reviewed_by else None
        with get_connection() as conn:
            with conn.cursor(row_factory=dict_row) as cur:
                cur.execute(
                    f"""
                    UPDATE upload_sessions
                    SET status = %s,
                        reviewed_by = COALESCE(reviewed_by, %s),
                        reviewed_at = COALESCE(reviewed_at, %s),
                        routing_decision = concat_ws(chr(10), NULLIF(routing_decision, ''), %s),
                        updated_at = %s
                    WHERE session_id = %s
                      AND status = %s
                    RETURNING {_SESSION_COLUMNS}
                    """,
                    (
                        target.value,
                        reviewed_by,
                        reviewed_at,
                        audit_entry,
                        now,
                        session_id,
                        expected.value,
                    ),
                )
                row = cur.fetchone()
            conn.commit()

        if row is None:
            return None
        return _to_session(row)

    def clear_temp_files(self, session_id: str) -> None:
        with get_connection() as conn:
            conn.execute(
                """
                UPDATE upload_sessions
                SET temp_files = '[]'::jsonb, updated_at = NOW()
                WHERE session_id = %s
                """,
                (session_id,),
            )
            conn.commit()
