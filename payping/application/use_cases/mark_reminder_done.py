from __future__ import annotations

import logging
from dataclasses import dataclass

from payping.application.clock import Clock, system_clock
from payping.application.use_cases.ownership import load_owned_reminder
from payping.domain.entities.actor import ActorContext
from payping.domain.entities.reminder import ReminderEntity
from payping.domain.errors import ConflictError
from payping.infrastructure.database.repositories.reminder_repository import ReminderRepository

logger = logging.getLogger(__name__)


@dataclass
class MarkReminderDoneUseCase:
    """pending -> done. Completing an already done reminder is a conflict."""

    reminders: ReminderRepository
    clock: Clock = system_clock

    def execute(self, actor: ActorContext, reminder_id: str) -> ReminderEntity:
        current = load_owned_reminder(self.reminders, actor, reminder_id)
        if current.is_done:
            raise ConflictError("Reminder already done")

        # done_at never precedes creation, even with a skewed clock
        done_at = max(self.clock(), current.created_at)
        # Conditional write: a concurrent completion makes this raise ConflictError
        updated = self.reminders.complete(reminder_id, done_at)
        logger.info("Reminder %s marked done by %s", reminder_id, actor.user_id)
        return updated
