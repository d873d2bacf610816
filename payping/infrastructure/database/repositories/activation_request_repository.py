from __future__ import annotations

import logging
from dataclasses import replace
from datetime import UTC, datetime

from payping.domain.entities.activation_request import ActivationRequestEntity, RequestStatus
from payping.domain.entities.plan import Plan
from payping.domain.entities.profile import ProfileEntity
from payping.domain.errors import ConflictError, DomainError, NotFoundError, TransactionError
from payping.domain.services.entitlement_service import EntitlementService
from payping.infrastructure.database.repositories.base_repository import (
    BaseRepository,
    parse_timestamp,
)
from payping.infrastructure.database.repositories.profile_repository import ProfileRepository

logger = logging.getLogger(__name__)

# Messages raised by the resolve_activation_request SQL function (db/schema.sql)
_RPC_NOT_FOUND = "activation_request_not_found"
_RPC_NOT_PENDING = "activation_request_not_pending"
_RPC_PROFILE_MISSING = "activation_profile_missing"


class ActivationRequestRepository(BaseRepository):
    @staticmethod
    def row_to_entity(row: dict) -> ActivationRequestEntity:
        """Convert database row to ActivationRequestEntity."""
        return ActivationRequestEntity(
            id=str(row["id"]),
            user_id=row["user_id"],
            plan_requested=Plan(row["plan_requested"]),
            method=row["method"],
            reference=row["reference"],
            amount=row["amount"],
            status=RequestStatus(row["status"]),
            created_at=parse_timestamp(row["created_at"]),
            note=row.get("note"),
            reviewed_at=parse_timestamp(row.get("reviewed_at")),
            reviewed_by=row.get("reviewed_by"),
        )

    def create(
        self,
        user_id: str,
        plan_requested: Plan,
        method: str,
        reference: str,
        amount: str,
        note: str | None = None,
    ) -> ActivationRequestEntity:
        now = datetime.now(UTC)

        # PostgreSQL mode
        if self.pg_mode:
            try:
                query = """
                    INSERT INTO activation_requests (
                        user_id, plan_requested, method, reference, amount, note, status, created_at
                    ) VALUES (%s, %s, %s, %s, %s, %s, 'pending', %s)
                    RETURNING *
                """
                row = self.pg_client.insert_returning(
                    query, (user_id, plan_requested.value, method, reference, amount, note, now)
                )
                return self.row_to_entity(row)
            except Exception as exc:
                raise RuntimeError(f"PostgreSQL insert activation request failed: {exc}") from exc

        # In-memory mode
        if self.mem_mode:
            entity = ActivationRequestEntity(
                id=self.mem.new_id("req"),
                user_id=user_id,
                plan_requested=plan_requested,
                method=method,
                reference=reference,
                amount=amount,
                status=RequestStatus.PENDING,
                created_at=now,
                note=note,
            )
            return self.mem.put("activation_requests", entity)

        # Supabase mode
        try:  # pragma: no cover - network
            data = {
                "user_id": user_id,
                "plan_requested": plan_requested.value,
                "method": method,
                "reference": reference,
                "amount": amount,
                "note": note,
                "status": RequestStatus.PENDING.value,
                "created_at": now.isoformat(),
            }
            res = self.client.table("activation_requests").insert(data).execute()
            return self.row_to_entity(res.data[0])
        except Exception as exc:
            raise RuntimeError(f"DB insert activation request failed: {exc}") from exc

    def get(self, request_id: str) -> ActivationRequestEntity | None:
        if self.is_malformed_id(request_id):
            return None

        # PostgreSQL mode
        if self.pg_mode:
            row = self.pg_client.fetch_one(
                "SELECT * FROM activation_requests WHERE id = %s", (request_id,)
            )
            return self.row_to_entity(row) if row else None

        # In-memory mode
        if self.mem_mode:
            return self.mem.get("activation_requests", request_id)

        # Supabase mode
        try:  # pragma: no cover - network
            res = self.client.table("activation_requests").select("*").eq("id", request_id).execute()
            rows = res.data or []
            return self.row_to_entity(rows[0]) if rows else None
        except Exception as exc:
            raise RuntimeError(f"DB get activation request failed: {exc}") from exc

    def list_requests(
        self, user_id: str | None = None, status: RequestStatus | None = None
    ) -> list[ActivationRequestEntity]:
        """Requests newest first, optionally limited to one owner and/or status."""
        # PostgreSQL mode
        if self.pg_mode:
            clauses: list[str] = []
            params: list[str] = []
            if user_id is not None:
                clauses.append("user_id = %s")
                params.append(user_id)
            if status is not None:
                clauses.append("status = %s")
                params.append(status.value)
            where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
            query = f"SELECT * FROM activation_requests {where} ORDER BY created_at DESC"
            rows = self.pg_client.fetch_all(query, tuple(params))
            return [self.row_to_entity(row) for row in rows]

        # In-memory mode
        if self.mem_mode:
            items = [
                r
                for r in self.mem.rows("activation_requests")
                if (user_id is None or r.user_id == user_id)
                and (status is None or r.status == status)
            ]
            items.sort(key=lambda r: r.created_at, reverse=True)
            return items

        # Supabase mode
        try:  # pragma: no cover - network
            q = self.client.table("activation_requests").select("*")
            if user_id is not None:
                q = q.eq("user_id", user_id)
            if status is not None:
                q = q.eq("status", status.value)
            res = q.order("created_at", desc=True).execute()
            return [self.row_to_entity(row) for row in res.data or []]
        except Exception as exc:
            raise RuntimeError(f"DB list activation requests failed: {exc}") from exc

    def resolve(
        self,
        request_id: str,
        decision: RequestStatus,
        reviewer_id: str,
        now: datetime,
    ) -> tuple[ActivationRequestEntity, ProfileEntity | None]:
        """Resolve a pending request in a single transaction.

        On approval the owning profile is activated on the requested plan in
        the same transaction. Returns the updated request and, for approvals,
        the updated profile.

        Raises:
            NotFoundError: the request does not exist.
            ConflictError: the request is no longer pending.
            TransactionError: any other failure; nothing was written.
        """
        if decision == RequestStatus.PENDING:
            raise ValueError("decision must be approved or rejected")

        try:
            if self.pg_mode:
                return self._resolve_postgres(request_id, decision, reviewer_id, now)
            if self.mem_mode:
                return self._resolve_memory(request_id, decision, reviewer_id, now)
            return self._resolve_supabase(request_id, decision, reviewer_id, now)  # pragma: no cover
        except DomainError:
            raise
        except Exception as exc:
            logger.exception("Resolving activation request %s rolled back", request_id)
            raise TransactionError(f"Could not resolve activation request: {exc}") from exc

    def _resolve_memory(
        self, request_id: str, decision: RequestStatus, reviewer_id: str, now: datetime
    ) -> tuple[ActivationRequestEntity, ProfileEntity | None]:
        with self.mem.transaction():
            current = self.mem.get("activation_requests", request_id)
            if current is None:
                raise NotFoundError("Activation request not found")
            if not current.is_pending:
                raise ConflictError(f"Activation request already {current.status.value}")
            updated = self.mem.put(
                "activation_requests",
                replace(current, status=decision, reviewed_at=now, reviewed_by=reviewer_id),
            )
            if decision != RequestStatus.APPROVED:
                return updated, None
            profile = self.mem.get("profiles", current.user_id)
            if profile is None:
                raise TransactionError("Owning profile not found; approval rolled back")
            activated = EntitlementService.with_approval(profile, current.plan_requested, now)
            return updated, self.mem.put("profiles", activated)

    def _resolve_postgres(
        self, request_id: str, decision: RequestStatus, reviewer_id: str, now: datetime
    ) -> tuple[ActivationRequestEntity, ProfileEntity | None]:
        with self.pg_client.transaction() as cursor:
            cursor.execute(
                "SELECT * FROM activation_requests WHERE id = %s FOR UPDATE", (request_id,)
            )
            row = cursor.fetchone()
            if row is None:
                raise NotFoundError("Activation request not found")
            if row["status"] != RequestStatus.PENDING.value:
                raise ConflictError(f"Activation request already {row['status']}")
            cursor.execute(
                """
                UPDATE activation_requests
                SET status = %s, reviewed_at = %s, reviewed_by = %s
                WHERE id = %s
                RETURNING *
                """,
                (decision.value, now, reviewer_id, request_id),
            )
            updated = self.row_to_entity(dict(cursor.fetchone()))
            if decision != RequestStatus.APPROVED:
                return updated, None
            cursor.execute(
                """
                UPDATE profiles
                SET is_active = TRUE, plan = %s, activated_at = %s
                WHERE id = %s
                RETURNING *
                """,
                (updated.plan_requested.value, now, updated.user_id),
            )
            profile_row = cursor.fetchone()
            if profile_row is None:
                raise TransactionError("Owning profile not found; approval rolled back")
            return updated, ProfileRepository.row_to_entity(dict(profile_row))

    def _resolve_supabase(  # pragma: no cover - network
        self, request_id: str, decision: RequestStatus, reviewer_id: str, now: datetime
    ) -> tuple[ActivationRequestEntity, ProfileEntity | None]:
        params = {
            "p_request_id": request_id,
            "p_decision": decision.value,
            "p_reviewer": reviewer_id,
            "p_now": now.isoformat(),
        }
        try:
            res = self.client.rpc("resolve_activation_request", params).execute()
        except Exception as exc:
            message = str(exc)
            if _RPC_NOT_FOUND in message:
                raise NotFoundError("Activation request not found") from exc
            if _RPC_NOT_PENDING in message:
                raise ConflictError("Activation request already resolved") from exc
            if _RPC_PROFILE_MISSING in message:
                raise TransactionError("Owning profile not found; approval rolled back") from exc
            raise
        payload = res.data or {}
        profile_row = payload.get("profile")
        return (
            self.row_to_entity(payload["request"]),
            ProfileRepository.row_to_entity(profile_row) if profile_row else None,
        )
