"""In-memory store used when Supabase is disabled (tests, demos).

Rows are frozen entities keyed by id, so a shallow copy of each table is a
complete snapshot. ``transaction()`` serialises writers and restores the
snapshot if the block raises.
"""
from __future__ import annotations

import threading
import uuid
from contextlib import contextmanager
from typing import Any, Generator

TABLES = ("profiles", "activation_requests", "clients", "reminders")

# parent table -> [(child table, foreign key column)], mirrors ON DELETE CASCADE
_CASCADES: dict[str, list[tuple[str, str]]] = {
    "clients": [("reminders", "client_id")],
}


class MemoryStore:
    def __init__(self) -> None:
        self._lock = threading.RLock()
        self.tables: dict[str, dict[str, Any]] = {name: {} for name in TABLES}

    @staticmethod
    def new_id(prefix: str) -> str:
        return f"{prefix}_{uuid.uuid4().hex[:12]}"

    def get(self, table: str, row_id: str) -> Any | None:
        # Blocks while another thread is inside transaction()
        with self._lock:
            return self.tables[table].get(row_id)

    def rows(self, table: str) -> list[Any]:
        with self._lock:
            return list(self.tables[table].values())

    def put(self, table: str, row: Any) -> Any:
        with self._lock:
            self.tables[table][row.id] = row
            return row

    def delete(self, table: str, row_id: str) -> bool:
        with self._lock:
            removed = self.tables[table].pop(row_id, None) is not None
            if removed:
                for child, column in _CASCADES.get(table, []):
                    orphans = [
                        key
                        for key, row in self.tables[child].items()
                        if getattr(row, column) == row_id
                    ]
                    for key in orphans:
                        self.delete(child, key)
            return removed

    @contextmanager
    def transaction(self) -> Generator[MemoryStore, None, None]:
        with self._lock:
            snapshot = {name: dict(rows) for name, rows in self.tables.items()}
            try:
                yield self
            except BaseException:
                for name, rows in snapshot.items():
                    self.tables[name].clear()
                    self.tables[name].update(rows)
                raise

    def reset(self) -> None:
        with self._lock:
            for rows in self.tables.values():
                rows.clear()


_MEM_STORE = MemoryStore()


def get_memory_store() -> MemoryStore:
    return _MEM_STORE
