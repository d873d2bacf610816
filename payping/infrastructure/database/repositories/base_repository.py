from __future__ import annotations

import uuid
from datetime import datetime
from enum import Enum
from typing import Any

from supabase import Client

from payping.core.config import get_settings
from payping.infrastructure.database.memory_store import get_memory_store
from payping.infrastructure.database.postgres_client import get_postgres_client


def parse_timestamp(value: Any) -> datetime | None:
    """PostgreSQL returns datetime objects, Supabase returns ISO strings."""
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def to_db(value: Any, *, iso: bool = False) -> Any:
    if isinstance(value, Enum):
        return value.value
    if iso and isinstance(value, datetime):
        return value.isoformat()
    return value


class BaseRepository:
    """Picks the backing store: local PostgreSQL, in-memory, or Supabase."""

    def __init__(self, client: Client | None) -> None:
        settings = get_settings()
        self.client = client
        self.disabled = settings.supabase_disabled
        self.use_local_db = settings.use_local_db
        self.pg_client = get_postgres_client() if self.use_local_db else None
        self.mem = get_memory_store()

    @property
    def pg_mode(self) -> bool:
        return bool(self.use_local_db and self.pg_client)

    @property
    def mem_mode(self) -> bool:
        return self.disabled or self.client is None

    def is_malformed_id(self, value: str) -> bool:
        """True when ``value`` cannot name a row in a UUID-keyed table.

        PostgreSQL and Supabase reject such ids with a type error instead of
        returning no rows; the in-memory store uses its own prefixed ids.
        """
        if self.mem_mode and not self.pg_mode:
            return False
        try:
            uuid.UUID(str(value))
        except ValueError:
            return True
        return False
