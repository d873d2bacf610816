from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from payping.application.clock import Clock, system_clock
from payping.application.use_cases.list_reminders import (
    ReminderWithClient,
    default_week_start,
    resolve_now,
)
from payping.domain.entities.actor import ActorContext
from payping.domain.entities.reminder import ReminderStatus
from payping.domain.services.bucketing_service import Bucket, bucket_reminders
from payping.infrastructure.database.repositories.client_repository import ClientRepository
from payping.infrastructure.database.repositories.reminder_repository import ReminderRepository

TODAY_PREVIEW = 5
OVERDUE_PREVIEW = 3


@dataclass(frozen=True)
class DashboardSummary:
    now: datetime
    due_today_count: int
    due_this_week_count: int
    overdue_count: int
    total_clients: int
    due_today: list[ReminderWithClient]
    overdue: list[ReminderWithClient]


@dataclass
class GetDashboardUseCase:
    """Counts and previews of the actor's pending reminders at this moment."""

    reminders: ReminderRepository
    clients: ClientRepository
    clock: Clock = system_clock
    week_starts_on: int = field(default_factory=default_week_start)

    def execute(self, actor: ActorContext, tz: str | None = None) -> DashboardSummary:
        now = resolve_now(self.clock, tz)
        clients = {c.id: c for c in self.clients.list_by_user(actor.user_id)}
        pending = self.reminders.list_by_user(actor.user_id, status=ReminderStatus.PENDING)
        buckets = bucket_reminders(pending, now, self.week_starts_on)

        def preview(bucket: Bucket, limit: int) -> list[ReminderWithClient]:
            return [
                ReminderWithClient(r, clients.get(r.client_id), bucket)
                for r in buckets[bucket][:limit]
            ]

        return DashboardSummary(
            now=now,
            due_today_count=len(buckets[Bucket.DUE_TODAY]),
            due_this_week_count=len(buckets[Bucket.DUE_THIS_WEEK]),
            overdue_count=len(buckets[Bucket.OVERDUE]),
            total_clients=len(clients),
            due_today=preview(Bucket.DUE_TODAY, TODAY_PREVIEW),
            overdue=preview(Bucket.OVERDUE, OVERDUE_PREVIEW),
        )
