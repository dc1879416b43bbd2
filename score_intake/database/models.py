from dataclasses import dataclass
from datetime import datetime
from typing import Any


@dataclass
class JobRecord:
    """Represents a row from the ingestion_jobs table."""

    id: int
    session_id: str
    storage_key: str
    file_name: str
    mime_type: str
    uploaded_by: str
    status: str
    attempts: int
    extracted_metadata: Any = None
    confidence_score: int | None = None
    error_message: str | None = None
    locked_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
