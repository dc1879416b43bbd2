from score_intake.logging.logger import Log
from score_intake.review.models import CleanupResult, UploadSession
from score_intake.review.store import BaseSessionStore
from score_intake.storage.base import BaseTempFileStorage


class TempFileCleaner:
    """Best-effort removal of a session's staged files.

    Never raises: every failure is logged and reported in the CleanupResult.
    Keys already referenced by committed library records are never deleted, and
    if that lookup fails nothing is deleted at all.
    """

    def __init__(self, storage: BaseTempFileStorage, store: BaseSessionStore) -> None:
        self._storage = storage
        self._store = store

    def cleanup(self, session: UploadSession) -> CleanupResult:
        session_id = session.session_id
        keys = list(session.temp_files)
        if not keys:
            Log.info("No temp files to clean up", session_id=session_id)
            return CleanupResult(attempted=True)

        try:
            committed = self._store.committed_storage_keys(keys)
        except Exception as exc:
            Log.error(
                "Failed to look up committed storage keys; skipping cleanup",
                session_id=session_id,
                error=str(exc),
            )
            return CleanupResult(attempted=False, errors=[f"committed key lookup failed: {exc}"])

        deleted: list[str] = []
        failed: list[str] = []
        errors: list[str] = []
        for key in keys:
            if key in committed:
                continue
            try:
                self._storage.delete(key)
                deleted.append(key)
            except Exception as exc:
                failed.append(key)
                errors.append(str(exc))
                Log.error(
                    "Failed to delete temp file", session_id=session_id, key=key, error=str(exc)
                )

        try:
            self._store.clear_temp_files(session_id)
        except Exception as exc:
            errors.append(f"clearing temp file list failed: {exc}")
            Log.error(
                "Failed to clear session temp file list",
                session_id=session_id,
                error=str(exc),
            )

        Log.info(
            "Temp file cleanup complete",
            session_id=session_id,
            total=len(keys),
            deleted=len(deleted),
            failed=len(failed),
            skipped=len(committed),
        )
        return CleanupResult(
            attempted=True,
            deleted=deleted,
            skipped=sorted(committed),
            failed=failed,
            errors=errors,
        )
