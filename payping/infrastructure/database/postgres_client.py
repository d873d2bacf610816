"""Local PostgreSQL access, used instead of Supabase when USE_LOCAL_DB=1.

Every helper runs inside :meth:`PostgresClient.transaction`, so a single
statement and a multi-statement unit (activation approval) share one
commit/rollback path.
"""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Generator

import psycopg2
from psycopg2.extras import RealDictCursor
from psycopg2.pool import ThreadedConnectionPool

from payping.core.config import Settings, get_settings

logger = logging.getLogger(__name__)

Row = dict[str, Any]


class PostgresClient:
    # Sync FastAPI routes run in a threadpool, hence the threaded pool
    def __init__(self, settings: Settings, max_connections: int = 10) -> None:
        try:
            self._pool = ThreadedConnectionPool(
                minconn=1,
                maxconn=max_connections,
                host=settings.postgres_host,
                port=settings.postgres_port,
                dbname=settings.postgres_db,
                user=settings.postgres_user,
                password=settings.postgres_password,
            )
        except psycopg2.Error as exc:  # pragma: no cover
            raise RuntimeError(f"Could not connect to PostgreSQL at {settings.postgres_host}: {exc}") from exc
        logger.info("PostgreSQL pool ready (%s/%s)", settings.postgres_host, settings.postgres_db)

    @contextmanager
    def transaction(self) -> Generator[Any, None, None]:
        """Dict cursor on one pooled connection; commits on exit, rolls back if the block raises."""
        conn = self._pool.getconn()
        try:
            with conn.cursor(cursor_factory=RealDictCursor) as cursor:
                yield cursor
            conn.commit()
        except BaseException:
            conn.rollback()
            raise
        finally:
            self._pool.putconn(conn)

    def fetch_one(self, query: str, params: tuple = ()) -> Row | None:
        with self.transaction() as cursor:
            cursor.execute(query, params)
            row = cursor.fetchone()
            return dict(row) if row else None

    def fetch_all(self, query: str, params: tuple = ()) -> list[Row]:
        with self.transaction() as cursor:
            cursor.execute(query, params)
            return [dict(row) for row in cursor.fetchall()]

    def insert_returning(self, query: str, params: tuple = ()) -> Row:
        """Run an INSERT/UPDATE ... RETURNING * that must produce a row."""
        row = self.fetch_one(query, params)
        if row is None:
            raise RuntimeError("Statement did not return a row")
        return row

    def execute(self, query: str, params: tuple = ()) -> int:
        """Run a write statement and return the affected row count."""
        with self.transaction() as cursor:
            cursor.execute(query, params)
            return cursor.rowcount


_POSTGRES_CLIENT: PostgresClient | None = None


def get_postgres_client() -> PostgresClient | None:
    """Process-wide client, or None unless USE_LOCAL_DB=1."""
    global _POSTGRES_CLIENT
    settings = get_settings()
    if not settings.use_local_db:
        return None
    if _POSTGRES_CLIENT is None:
        _POSTGRES_CLIENT = PostgresClient(settings)
    return _POSTGRES_CLIENT
