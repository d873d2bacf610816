from __future__ import annotations

from dataclasses import replace
from datetime import UTC, datetime
from typing import Any

from payping.domain.entities.reminder import (
    ReminderChannel,
    ReminderEntity,
    ReminderKind,
    ReminderStatus,
)
from payping.domain.errors import ConflictError
from payping.infrastructure.database.repositories.base_repository import (
    BaseRepository,
    parse_timestamp,
    to_db,
)

# status and done_at only change through complete()
_EDITABLE = ("client_id", "remind_at", "kind", "channel", "message")


class ReminderRepository(BaseRepository):
    @staticmethod
    def row_to_entity(row: dict) -> ReminderEntity:
        """Convert database row to ReminderEntity."""
        return ReminderEntity(
            id=str(row["id"]),
            user_id=row["user_id"],
            client_id=str(row["client_id"]),
            remind_at=parse_timestamp(row["remind_at"]),
            kind=ReminderKind(row["kind"]),
            channel=ReminderChannel(row["channel"]),
            message=row["message"],
            status=ReminderStatus(row["status"]),
            created_at=parse_timestamp(row["created_at"]),
            done_at=parse_timestamp(row.get("done_at")),
        )

    def create(
        self,
        user_id: str,
        client_id: str,
        remind_at: datetime,
        kind: ReminderKind,
        channel: ReminderChannel,
        message: str,
    ) -> ReminderEntity:
        now = datetime.now(UTC)

        # PostgreSQL mode
        if self.pg_mode:
            try:
                query = """
                    INSERT INTO reminders (
                        user_id, client_id, remind_at, kind, channel, message, status, created_at
                    ) VALUES (%s, %s, %s, %s, %s, %s, 'pending', %s)
                    RETURNING *
                """
                row = self.pg_client.insert_returning(
                    query, (user_id, client_id, remind_at, kind.value, channel.value, message, now)
                )
                return self.row_to_entity(row)
            except Exception as exc:
                raise RuntimeError(f"PostgreSQL insert reminder failed: {exc}") from exc

        # In-memory mode
        if self.mem_mode:
            entity = ReminderEntity(
                id=self.mem.new_id("rem"),
                user_id=user_id,
                client_id=client_id,
                remind_at=remind_at,
                kind=kind,
                channel=channel,
                message=message,
                status=ReminderStatus.PENDING,
                created_at=now,
            )
            with self.mem.transaction():
                # FK: the client must still exist
                if self.mem.get("clients", client_id) is None:
                    raise RuntimeError("In-memory insert reminder failed: unknown client_id")
                return self.mem.put("reminders", entity)

        # Supabase mode
        try:  # pragma: no cover - network
            data = {
                "user_id": user_id,
                "client_id": client_id,
                "remind_at": remind_at.isoformat(),
                "kind": kind.value,
                "channel": channel.value,
                "message": message,
                "status": ReminderStatus.PENDING.value,
                "created_at": now.isoformat(),
            }
            res = self.client.table("reminders").insert(data).execute()
            return self.row_to_entity(res.data[0])
        except Exception as exc:
            raise RuntimeError(f"DB insert reminder failed: {exc}") from exc

    def get(self, reminder_id: str) -> ReminderEntity | None:
        if self.is_malformed_id(reminder_id):
            return None

        # PostgreSQL mode
        if self.pg_mode:
            row = self.pg_client.fetch_one("SELECT * FROM reminders WHERE id = %s", (reminder_id,))
            return self.row_to_entity(row) if row else None

        # In-memory mode
        if self.mem_mode:
            return self.mem.get("reminders", reminder_id)

        # Supabase mode
        try:  # pragma: no cover - network
            res = self.client.table("reminders").select("*").eq("id", reminder_id).execute()
            rows = res.data or []
            return self.row_to_entity(rows[0]) if rows else None
        except Exception as exc:
            raise RuntimeError(f"DB get reminder failed: {exc}") from exc

    def list_by_user(
        self, user_id: str, status: ReminderStatus | None = None
    ) -> list[ReminderEntity]:
        """The user's reminders ordered by remind_at ascending."""
        # PostgreSQL mode
        if self.pg_mode:
            if status is None:
                query = "SELECT * FROM reminders WHERE user_id = %s ORDER BY remind_at ASC"
                rows = self.pg_client.fetch_all(query, (user_id,))
            else:
                query = """
                    SELECT * FROM reminders
                    WHERE user_id = %s AND status = %s
                    ORDER BY remind_at ASC
                """
                rows = self.pg_client.fetch_all(query, (user_id, status.value))
            return [self.row_to_entity(row) for row in rows]

        # In-memory mode
        if self.mem_mode:
            items = [
                r
                for r in self.mem.rows("reminders")
                if r.user_id == user_id and (status is None or r.status == status)
            ]
            items.sort(key=lambda r: r.remind_at)
            return items

        # Supabase mode
        try:  # pragma: no cover - network
            q = self.client.table("reminders").select("*").eq("user_id", user_id)
            if status is not None:
                q = q.eq("status", status.value)
            res = q.order("remind_at", desc=False).execute()
            return [self.row_to_entity(row) for row in res.data or []]
        except Exception as exc:
            raise RuntimeError(f"DB list reminders failed: {exc}") from exc

    def list_by_client(self, client_id: str) -> list[ReminderEntity]:
        # PostgreSQL mode
        if self.pg_mode:
            query = "SELECT * FROM reminders WHERE client_id = %s ORDER BY remind_at ASC"
            rows = self.pg_client.fetch_all(query, (client_id,))
            return [self.row_to_entity(row) for row in rows]

        # In-memory mode
        if self.mem_mode:
            items = [r for r in self.mem.rows("reminders") if r.client_id == client_id]
            items.sort(key=lambda r: r.remind_at)
            return items

        # Supabase mode
        try:  # pragma: no cover - network
            res = (
                self.client.table("reminders")
                .select("*")
                .eq("client_id", client_id)
                .order("remind_at", desc=False)
                .execute()
            )
            return [self.row_to_entity(row) for row in res.data or []]
        except Exception as exc:
            raise RuntimeError(f"DB list reminders by client failed: {exc}") from exc

    def update(self, reminder_id: str, changes: dict[str, Any]) -> ReminderEntity | None:
        changes = {key: value for key, value in changes.items() if key in _EDITABLE}
        if not changes:
            return self.get(reminder_id)

        # PostgreSQL mode
        if self.pg_mode:
            try:
                assignments = ", ".join(f"{column} = %s" for column in changes)
                query = f"UPDATE reminders SET {assignments} WHERE id = %s RETURNING *"
                values = tuple(to_db(value) for value in changes.values())
                row = self.pg_client.fetch_one(query, (*values, reminder_id))
                return self.row_to_entity(row) if row else None
            except Exception as exc:
                raise RuntimeError(f"PostgreSQL update reminder failed: {exc}") from exc

        # In-memory mode
        if self.mem_mode:
            with self.mem.transaction():
                current = self.mem.get("reminders", reminder_id)
                if current is None:
                    return None
                if "client_id" in changes and self.mem.get("clients", changes["client_id"]) is None:
                    raise RuntimeError("In-memory update reminder failed: unknown client_id")
                return self.mem.put("reminders", replace(current, **changes))

        # Supabase mode
        try:  # pragma: no cover - network
            data = {key: to_db(value, iso=True) for key, value in changes.items()}
            res = self.client.table("reminders").update(data).eq("id", reminder_id).execute()
            rows = res.data or []
            return self.row_to_entity(rows[0]) if rows else None
        except Exception as exc:
            raise RuntimeError(f"DB update reminder failed: {exc}") from exc

    def complete(self, reminder_id: str, done_at: datetime) -> ReminderEntity:
        """pending -> done as a single conditional write.

        Raises:
            ConflictError: the reminder is missing or no longer pending, e.g.
                another request completed it first.
        """
        # PostgreSQL mode
        if self.pg_mode:
            try:
                query = """
                    UPDATE reminders SET status = %s, done_at = %s
                    WHERE id = %s AND status = %s
                    RETURNING *
                """
                row = self.pg_client.fetch_one(
                    query,
                    (ReminderStatus.DONE.value, done_at, reminder_id, ReminderStatus.PENDING.value),
                )
            except Exception as exc:
                raise RuntimeError(f"PostgreSQL complete reminder failed: {exc}") from exc
            if row is None:
                raise ConflictError("Reminder already done")
            return self.row_to_entity(row)

        # In-memory mode
        if self.mem_mode:
            with self.mem.transaction():
                current = self.mem.get("reminders", reminder_id)
                if current is None or current.status != ReminderStatus.PENDING:
                    raise ConflictError("Reminder already done")
                return self.mem.put(
                    "reminders", replace(current, status=ReminderStatus.DONE, done_at=done_at)
                )

        # Supabase mode
        try:  # pragma: no cover - network
            data = {"status": ReminderStatus.DONE.value, "done_at": done_at.isoformat()}
            res = (
                self.client.table("reminders")
                .update(data)
                .eq("id", reminder_id)
                .eq("status", ReminderStatus.PENDING.value)
                .execute()
            )
            rows = res.data or []
        except Exception as exc:
            raise RuntimeError(f"DB complete reminder failed: {exc}") from exc
        if not rows:  # pragma: no cover - network
            raise ConflictError("Reminder already done")
        return self.row_to_entity(rows[0])  # pragma: no cover - network

    def delete(self, reminder_id: str) -> bool:
        # PostgreSQL mode
        if self.pg_mode:
            affected = self.pg_client.execute("DELETE FROM reminders WHERE id = %s", (reminder_id,))
            return affected > 0

        # In-memory mode
        if self.mem_mode:
            return self.mem.delete("reminders", reminder_id)

        # Supabase mode
        try:  # pragma: no cover - network
            res = self.client.table("reminders").delete().eq("id", reminder_id).execute()
            return bool(res.data)
        except Exception as exc:
            raise RuntimeError(f"DB delete reminder failed: {exc}") from exc
