from pathlib import Path

from score_intake.storage.paths import resolve_key


class FileLoader:
    """Reads staged upload bytes from the local files root."""

    FILES_ROOT = Path("/app/files")

    def __init__(self, files_root: Path | None = None) -> None:
        self._files_root = files_root if files_root is not None else self.FILES_ROOT

    def load(self, storage_key: str) -> bytes:
        """Read a staged file.

        Raises:
            FileNotFoundError: if nothing is stored under the key.
            InvalidStorageKeyError: if the key is empty, absolute or escapes the files root.
        """
        path = resolve_key(self._files_root, storage_key)
        if not path.is_file():
            raise FileNotFoundError(f"File not found: {path}")
        return path.read_bytes()
