from score_intake.config.settings import Settings
from score_intake.database.repositories.upload_sessions_repository import (
    UploadSessionsRepository,
)
from score_intake.review.memory_store import InMemorySessionStore
from score_intake.review.store import BaseSessionStore


class SessionStoreFactory:
    """Creates the session store selected by settings.session_store."""

    STORES: dict[str, type[BaseSessionStore]] = {
        "postgres": UploadSessionsRepository,
        "memory": InMemorySessionStore,
    }

    @classmethod
    def create(cls, settings: Settings) -> BaseSessionStore:
        name = settings.session_store.lower()
        store_cls = cls.STORES.get(name)
        if store_cls is None:
            raise ValueError(
                f"Unknown session store '{name}'. Choose from: {list(cls.STORES)}"
            )
        return store_cls()
