from __future__ import annotations

from dataclasses import replace
from datetime import UTC, datetime
from typing import Any

from payping.domain.entities.client import ClientEntity
from payping.infrastructure.database.repositories.base_repository import (
    BaseRepository,
    parse_timestamp,
)

_EDITABLE = ("name", "contact", "notes")


class ClientRepository(BaseRepository):
    @staticmethod
    def row_to_entity(row: dict) -> ClientEntity:
        """Convert database row to ClientEntity."""
        return ClientEntity(
            id=str(row["id"]),
            user_id=row["user_id"],
            name=row["name"],
            contact=row["contact"],
            created_at=parse_timestamp(row["created_at"]),
            notes=row.get("notes"),
        )

    def create(self, user_id: str, name: str, contact: str, notes: str | None = None) -> ClientEntity:
        now = datetime.now(UTC)

        # PostgreSQL mode
        if self.pg_mode:
            try:
                query = """
                    INSERT INTO clients (user_id, name, contact, notes, created_at)
                    VALUES (%s, %s, %s, %s, %s)
                    RETURNING *
                """
                row = self.pg_client.insert_returning(query, (user_id, name, contact, notes, now))
                return self.row_to_entity(row)
            except Exception as exc:
                raise RuntimeError(f"PostgreSQL insert client failed: {exc}") from exc

        # In-memory mode
        if self.mem_mode:
            entity = ClientEntity(
                id=self.mem.new_id("cli"),
                user_id=user_id,
                name=name,
                contact=contact,
                created_at=now,
                notes=notes,
            )
            return self.mem.put("clients", entity)

        # Supabase mode
        try:  # pragma: no cover - network
            data = {
                "user_id": user_id,
                "name": name,
                "contact": contact,
                "notes": notes,
                "created_at": now.isoformat(),
            }
            res = self.client.table("clients").insert(data).execute()
            return self.row_to_entity(res.data[0])
        except Exception as exc:
            raise RuntimeError(f"DB insert client failed: {exc}") from exc

    def get(self, client_id: str) -> ClientEntity | None:
        if self.is_malformed_id(client_id):
            return None

        # PostgreSQL mode
        if self.pg_mode:
            row = self.pg_client.fetch_one("SELECT * FROM clients WHERE id = %s", (client_id,))
            return self.row_to_entity(row) if row else None

        # In-memory mode
        if self.mem_mode:
            return self.mem.get("clients", client_id)

        # Supabase mode
        try:  # pragma: no cover - network
            res = self.client.table("clients").select("*").eq("id", client_id).execute()
            rows = res.data or []
            return self.row_to_entity(rows[0]) if rows else None
        except Exception as exc:
            raise RuntimeError(f"DB get client failed: {exc}") from exc

    def list_by_user(self, user_id: str) -> list[ClientEntity]:
        """The user's clients, newest first."""
        # PostgreSQL mode
        if self.pg_mode:
            query = """
                SELECT * FROM clients
                WHERE user_id = %s
                ORDER BY created_at DESC
            """
            rows = self.pg_client.fetch_all(query, (user_id,))
            return [self.row_to_entity(row) for row in rows]

        # In-memory mode
        if self.mem_mode:
            items = [c for c in self.mem.rows("clients") if c.user_id == user_id]
            items.sort(key=lambda c: c.created_at, reverse=True)
            return items

        # Supabase mode
        try:  # pragma: no cover - network
            res = (
                self.client.table("clients")
                .select("*")
                .eq("user_id", user_id)
                .order("created_at", desc=True)
                .execute()
            )
            return [self.row_to_entity(row) for row in res.data or []]
        except Exception as exc:
            raise RuntimeError(f"DB list clients failed: {exc}") from exc

    def update(self, client_id: str, changes: dict[str, Any]) -> ClientEntity | None:
        changes = {key: value for key, value in changes.items() if key in _EDITABLE}
        if not changes:
            return self.get(client_id)

        # PostgreSQL mode
        if self.pg_mode:
            try:
                assignments = ", ".join(f"{column} = %s" for column in changes)
                query = f"UPDATE clients SET {assignments} WHERE id = %s RETURNING *"
                row = self.pg_client.fetch_one(query, (*changes.values(), client_id))
                return self.row_to_entity(row) if row else None
            except Exception as exc:
                raise RuntimeError(f"PostgreSQL update client failed: {exc}") from exc

        # In-memory mode
        if self.mem_mode:
            with self.mem.transaction():
                current = self.mem.get("clients", client_id)
                if current is None:
                    return None
                return self.mem.put("clients", replace(current, **changes))

        # Supabase mode
        try:  # pragma: no cover - network
            res = self.client.table("clients").update(changes).eq("id", client_id).execute()
            rows = res.data or []
            return self.row_to_entity(rows[0]) if rows else None
        except Exception as exc:
            raise RuntimeError(f"DB update client failed: {exc}") from exc

    def delete(self, client_id: str) -> bool:
        """Delete a client; the store removes its reminders (ON DELETE CASCADE)."""
        # PostgreSQL mode
        if self.pg_mode:
            affected = self.pg_client.execute("DELETE FROM clients WHERE id = %s", (client_id,))
            return affected > 0

        # In-memory mode
        if self.mem_mode:
            return self.mem.delete("clients", client_id)

        # Supabase mode
        try:  # pragma: no cover - network
            res = self.client.table("clients").delete().eq("id", client_id).execute()
            return bool(res.data)
        except Exception as exc:
            raise RuntimeError(f"DB delete client failed: {exc}") from exc
