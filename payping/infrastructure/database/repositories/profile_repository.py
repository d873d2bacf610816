from __future__ import annotations

from dataclasses import replace
from datetime import UTC, datetime

from payping.domain.entities.plan import Plan
from payping.domain.entities.profile import ProfileEntity
from payping.infrastructure.database.repositories.base_repository import (
    BaseRepository,
    parse_timestamp,
)


class ProfileRepository(BaseRepository):
    @staticmethod
    def row_to_entity(row: dict) -> ProfileEntity:
        """Convert database row to ProfileEntity."""
        plan = row.get("plan")
        return ProfileEntity(
            id=row["id"],
            email=row.get("email"),
            is_active=bool(row.get("is_active", False)),
            plan=Plan(plan) if plan else None,
            activated_at=parse_timestamp(row.get("activated_at")),
            created_at=parse_timestamp(row.get("created_at")),
        )

    def upsert(self, user_id: str, email: str | None) -> ProfileEntity:
        """Create the profile on first sight of an identity.

        An existing profile only has its email refreshed; entitlement fields
        are never reset here.
        """
        # PostgreSQL mode
        if self.pg_mode:
            try:
                query = """
                    INSERT INTO profiles (id, email, is_active, created_at)
                    VALUES (%s, %s, FALSE, CURRENT_TIMESTAMP)
                    ON CONFLICT (id) DO UPDATE SET email = COALESCE(EXCLUDED.email, profiles.email)
                    RETURNING *
                """
                row = self.pg_client.insert_returning(query, (user_id, email))
                return self.row_to_entity(row)
            except Exception as exc:
                raise RuntimeError(f"PostgreSQL upsert profile failed: {exc}") from exc

        # In-memory mode
        if self.mem_mode:
            with self.mem.transaction():
                current = self.mem.get("profiles", user_id)
                if current is None:
                    entity = ProfileEntity(id=user_id, email=email, created_at=datetime.now(UTC))
                elif email and email != current.email:
                    entity = replace(current, email=email)
                else:
                    entity = current
                return self.mem.put("profiles", entity)

        # Supabase mode
        try:  # pragma: no cover - network
            existing = self.client.table("profiles").select("*").eq("id", user_id).execute()
            if existing.data:
                if email and existing.data[0].get("email") != email:
                    res = self.client.table("profiles").update({"email": email}).eq("id", user_id).execute()
                    return self.row_to_entity(res.data[0])
                return self.row_to_entity(existing.data[0])
            res = (
                self.client.table("profiles")
                .insert({"id": user_id, "email": email, "is_active": False})
                .execute()
            )
            return self.row_to_entity(res.data[0])
        except Exception as exc:
            raise RuntimeError(f"DB upsert profile failed: {exc}") from exc

    def get(self, user_id: str) -> ProfileEntity | None:
        # PostgreSQL mode
        if self.pg_mode:
            row = self.pg_client.fetch_one("SELECT * FROM profiles WHERE id = %s", (user_id,))
            return self.row_to_entity(row) if row else None

        # In-memory mode
        if self.mem_mode:
            return self.mem.get("profiles", user_id)

        # Supabase mode
        try:  # pragma: no cover - network
            res = self.client.table("profiles").select("*").eq("id", user_id).execute()
            rows = res.data or []
            return self.row_to_entity(rows[0]) if rows else None
        except Exception as exc:
            raise RuntimeError(f"DB get profile failed: {exc}") from exc

    def list_all(self) -> list[ProfileEntity]:
        """Every profile, newest first (admin view)."""
        # PostgreSQL mode
        if self.pg_mode:
            rows = self.pg_client.fetch_all("SELECT * FROM profiles ORDER BY created_at DESC")
            return [self.row_to_entity(row) for row in rows]

        # In-memory mode
        if self.mem_mode:
            items = self.mem.rows("profiles")
            items.sort(key=lambda p: p.created_at or datetime.min.replace(tzinfo=UTC), reverse=True)
            return items

        # Supabase mode
        try:  # pragma: no cover - network
            res = self.client.table("profiles").select("*").order("created_at", desc=True).execute()
            return [self.row_to_entity(row) for row in res.data or []]
        except Exception as exc:
            raise RuntimeError(f"DB list profiles failed: {exc}") from exc

    def set_entitlement(
        self, user_id: str, is_active: bool, activated_at: datetime | None
    ) -> ProfileEntity | None:
        # PostgreSQL mode
        if self.pg_mode:
            try:
                query = """
                    UPDATE profiles SET is_active = %s, activated_at = %s WHERE id = %s
                    RETURNING *
                """
                row = self.pg_client.fetch_one(query, (is_active, activated_at, user_id))
                return self.row_to_entity(row) if row else None
            except Exception as exc:
                raise RuntimeError(f"PostgreSQL update profile failed: {exc}") from exc

        # In-memory mode
        if self.mem_mode:
            with self.mem.transaction():
                current = self.mem.get("profiles", user_id)
                if current is None:
                    return None
                return self.mem.put(
                    "profiles", replace(current, is_active=is_active, activated_at=activated_at)
                )

        # Supabase mode
        try:  # pragma: no cover - network
            data = {
                "is_active": is_active,
                "activated_at": activated_at.isoformat() if activated_at else None,
            }
            res = self.client.table("profiles").update(data).eq("id", user_id).execute()
            rows = res.data or []
            return self.row_to_entity(rows[0]) if rows else None
        except Exception as exc:
            raise RuntimeError(f"DB update profile failed: {exc}") from exc

    def set_plan(self, user_id: str, plan: Plan | None) -> ProfileEntity | None:
        value = plan.value if plan else None

        # PostgreSQL mode
        if self.pg_mode:
            try:
                query = "UPDATE profiles SET plan = %s WHERE id = %s RETURNING *"
                row = self.pg_client.fetch_one(query, (value, user_id))
                return self.row_to_entity(row) if row else None
            except Exception as exc:
                raise RuntimeError(f"PostgreSQL update profile failed: {exc}") from exc

        # In-memory mode
        if self.mem_mode:
            with self.mem.transaction():
                current = self.mem.get("profiles", user_id)
                if current is None:
                    return None
                return self.mem.put("profiles", replace(current, plan=plan))

        # Supabase mode
        try:  # pragma: no cover - network
            res = self.client.table("profiles").update({"plan": value}).eq("id", user_id).execute()
            rows = res.data or []
            return self.row_to_entity(rows[0]) if rows else None
        except Exception as exc:
            raise RuntimeError(f"DB update profile failed: {exc}") from exc
