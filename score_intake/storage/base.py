from abc import ABC, abstractmethod


class BaseTempFileStorage(ABC):
    """Contract for the storage driver holding staged upload files."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove one stored file.

        Raises:
            CleanupError: if the file exists but cannot be removed.
        """
