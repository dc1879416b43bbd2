from pathlib import Path

from score_intake.exceptions import CleanupError
from score_intake.storage.base import BaseTempFileStorage
from score_intake.storage.paths import resolve_key


class LocalTempFileStorage(BaseTempFileStorage):
    """Temp files kept on the local filesystem under a single root."""

    def __init__(self, root: Path) -> None:
        self._root = root

    def delete(self, key: str) -> None:
        """Delete a stored file. Missing files count as already deleted."""
        try:
            path = resolve_key(self._root, key)
            path.unlink(missing_ok=True)
        except (OSError, ValueError) as exc:
            raise CleanupError(f"Could not delete '{key}': {exc}") from exc
