from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

import psycopg
from psycopg_pool import ConnectionPool

from score_intake.config.settings import Settings

_pool: ConnectionPool | None = None


def build_conninfo(settings: Settings) -> str:
    return (
        f"host={settings.db_host} "
        f"port={settings.db_port} "
        f"dbname={settings.db_database} "
        f"user={settings.db_username} "
        f"password={settings.db_password}"
    )


def init_pool(settings: Settings) -> None:
    """Open the process-wide connection pool. Calling it twice is an error."""
    global _pool  # noqa: PLW0603
    if _pool is not None:
        raise RuntimeError("Connection pool already initialized")
    _pool = ConnectionPool(build_conninfo(settings), min_size=1, max_size=10, open=True)


def close_pool() -> None:
    global _pool  # noqa: PLW0603
    if _pool is not None:
        _pool.close()
        _pool = None


@contextmanager
def get_connection() -> Generator[psycopg.Connection[Any], None, None]:
    """Yield a pooled connection. Caller manages commit/rollback."""
    if _pool is None:
        raise RuntimeError("Connection pool not initialized. Call init_pool() first.")
    with _pool.connection() as conn:
        yield conn
