from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from payping.application.clock import Clock, system_clock
from payping.application.use_cases.ownership import load_owned_client, load_owned_reminder
from payping.core.config import get_settings
from payping.domain.entities.actor import ActorContext
from payping.domain.entities.client import ClientEntity
from payping.domain.entities.reminder import ReminderEntity
from payping.domain.services import validation_service as v
from payping.domain.services.bucketing_service import (
    Bucket,
    ReminderView,
    classify,
    filter_reminders,
)
from payping.infrastructure.database.repositories.client_repository import ClientRepository
from payping.infrastructure.database.repositories.reminder_repository import ReminderRepository


def default_week_start() -> int:
    return get_settings().week_starts_on


def resolve_now(clock: Clock, tz: str | None) -> datetime:
    """``clock()`` seen from the caller's timezone, when one is given."""
    now = clock()
    return now.astimezone(v.zone(tz)) if tz else now


@dataclass(frozen=True)
class ReminderWithClient:
    reminder: ReminderEntity
    client: ClientEntity | None
    bucket: Bucket


@dataclass
class ListRemindersUseCase:
    reminders: ReminderRepository
    clients: ClientRepository
    clock: Clock = system_clock
    week_starts_on: int = field(default_factory=default_week_start)

    def execute(
        self,
        actor: ActorContext,
        view: ReminderView | str = ReminderView.ALL,
        search: str | None = None,
        tz: str | None = None,
    ) -> list[ReminderWithClient]:
        """Own reminders for one list tab, ordered by ``remind_at``."""
        view = v.enum_value(ReminderView, view, "view")
        now = resolve_now(self.clock, tz)
        clients = {c.id: c for c in self.clients.list_by_user(actor.user_id)}
        items = filter_reminders(
            self.reminders.list_by_user(actor.user_id),
            now,
            view=view,
            search=search,
            client_names={cid: c.name for cid, c in clients.items()},
            week_starts_on=self.week_starts_on,
        )
        return [
            ReminderWithClient(r, clients.get(r.client_id), classify(r, now, self.week_starts_on))
            for r in items
        ]


@dataclass
class GetReminderUseCase:
    reminders: ReminderRepository
    clients: ClientRepository
    clock: Clock = system_clock
    week_starts_on: int = field(default_factory=default_week_start)

    def execute(self, actor: ActorContext, reminder_id: str, tz: str | None = None) -> ReminderWithClient:
        reminder = load_owned_reminder(self.reminders, actor, reminder_id)
        client = load_owned_client(self.clients, actor, reminder.client_id)
        now = resolve_now(self.clock, tz)
        return ReminderWithClient(reminder, client, classify(reminder, now, self.week_starts_on))
