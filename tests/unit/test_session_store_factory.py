from unittest.mock import MagicMock

import pytest

from score_intake.database.repositories.upload_sessions_repository import (
    UploadSessionsRepository,
)
from score_intake.review.factory import SessionStoreFactory
from score_intake.review.memory_store import InMemorySessionStore


class TestSessionStoreFactory:
    def test_creates_memory_store(self) -> None:
        store = SessionStoreFactory.create(MagicMock(session_store="memory"))
        assert isinstance(store, InMemorySessionStore)

    def test_creates_postgres_store(self) -> None:
        store = SessionStoreFactory.create(MagicMock(session_store="Postgres"))
        assert isinstance(store, UploadSessionsRepository)

    def test_raises_for_unknown_store(self) -> None:
        with pytest.raises(ValueError, match="Unknown session store"):
            SessionStoreFactory.create(MagicMock(session_store="redis"))
