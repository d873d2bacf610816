from __future__ import annotations

from dataclasses import dataclass

from payping.application.use_cases.ownership import load_owned_reminder
from payping.domain.entities.actor import ActorContext
from payping.infrastructure.database.repositories.reminder_repository import ReminderRepository


@dataclass
class DeleteReminderUseCase:
    reminders: ReminderRepository

    def execute(self, actor: ActorContext, reminder_id: str) -> bool:
        load_owned_reminder(self.reminders, actor, reminder_id)
        return self.reminders.delete(reminder_id)
