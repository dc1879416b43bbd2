class IntakeError(Exception):
    """Base exception for all ingestion-related errors."""


class ValidationError(IntakeError, ValueError):
    """Raised when input to a fingerprint, metadata or session function is malformed."""


class SessionNotFoundError(IntakeError):
    """Raised when no upload session exists for the given id."""


class InvalidTransitionError(IntakeError):
    """Raised when a review transition is not allowed from the session's current status."""

    def __init__(self, session_id: str, current_status: str, detail: str = "") -> None:
        self.session_id = session_id
        self.current_status = current_status
        message = f"Session {session_id} cannot transition from status {current_status}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class PdfAnalysisError(IntakeError):
    """Raised by page-count adapters when a PDF cannot be opened or read."""


class CleanupError(IntakeError):
    """Raised by temp-file storage drivers when a file cannot be removed."""


class InvalidStorageKeyError(IntakeError, ValueError):
    """Raised when a storage key is empty, absolute or escapes the storage root."""
