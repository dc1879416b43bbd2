import dataclasses
import threading
from datetime import datetime

from score_intake.dedup.models import PieceMatch, SessionMatch
from score_intake.fingerprint.fingerprint import compute_work_fingerprint
from score_intake.review.models import SessionStatus, UploadSession
from score_intake.review.store import BaseSessionStore, append_audit


class InMemorySessionStore(BaseSessionStore):
    """Process-local session store guarded by a single lock.

    One instance per worker process. Library pieces and committed records are
    registered by whatever plays the library role (tests, local runs).
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._sessions: dict[str, UploadSession] = {}
        self._pieces: dict[str, PieceMatch] = {}
        self._library_records: dict[str, set[str]] = {}
        self._closed = False

    def add_piece(self, piece_id: str, title: str, composer: str | None = None) -> None:
        fingerprint = compute_work_fingerprint(title, composer)
        with self._lock:
            self._pieces[fingerprint.hash] = PieceMatch(piece_id=piece_id, title=title)

    def add_library_record(self, session_id: str, storage_keys: list[str] | None = None) -> None:
        with self._lock:
            self._library_records.setdefault(session_id, set()).update(storage_keys or [])

    def create(self, session: UploadSession) -> UploadSession:
        with self._lock:
            self._ensure_open()
            if session.session_id in self._sessions:
                raise ValueError(f"Session {session.session_id} already exists")
            self._sessions[session.session_id] = session
            return session

    def find_by_id(self, session_id: str) -> UploadSession | None:
        with self._lock:
            self._ensure_open()
            return self._sessions.get(session_id)

    def find_by_source_sha256(self, source_sha256: str) -> SessionMatch | None:
        with self._lock:
            self._ensure_open()
            matches = [s for s in self._sessions.values() if s.source_sha256 == source_sha256]
        if not matches:
            return None
        first = min(matches, key=lambda s: s.created_at)
        return SessionMatch(session_id=first.session_id, status=first.status.value)

    def find_piece_by_work_fingerprint(self, fingerprint_hash: str) -> PieceMatch | None:
        with self._lock:
            self._ensure_open()
            return self._pieces.get(fingerprint_hash)

    def has_library_record(self, session_id: str) -> bool:
        with self._lock:
            self._ensure_open()
            return session_id in self._library_records

    def committed_storage_keys(self, keys: list[str]) -> set[str]:
        with self._lock:
            self._ensure_open()
            committed: set[str] = set()
            for record_keys in self._library_records.values():
                committed |= record_keys
        return committed.intersection(keys)

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
        with self._lock:
            self._ensure_open()
            current = self._sessions.get(session_id)
            if current is None or current.status != expected:
                return None
            updated = dataclasses.replace(
                current,
                status=target,
                reviewed_by=current.reviewed_by or reviewed_by,
                reviewed_at=current.reviewed_at or (now if reviewed_by else None),
                routing_decision=append_audit(current.routing_decision, audit_entry),
                updated_at=now,
            )
            self._sessions[session_id] = updated
            return updated

    def clear_temp_files(self, session_id: str) -> None:
        with self._lock:
            self._ensure_open()
            current = self._sessions.get(session_id)
            if current is not None:
                self._sessions[session_id] = dataclasses.replace(current, temp_files=[])

    def close(self) -> None:
        with self._lock:
            self._sessions.clear()
            self._pieces.clear()
            self._library_records.clear()
            self._closed = True

    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError("Session store is closed")
