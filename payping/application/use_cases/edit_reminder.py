from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from payping.application.clock import Clock, as_aware, system_clock
from payping.application.use_cases.ownership import load_owned_client, load_owned_reminder
from payping.domain.entities.actor import ActorContext
from payping.domain.entities.reminder import ReminderChannel, ReminderEntity, ReminderKind
from payping.domain.errors import NotFoundError, ValidationError
from payping.domain.services import validation_service as v
from payping.infrastructure.database.repositories.client_repository import ClientRepository
from payping.infrastructure.database.repositories.reminder_repository import ReminderRepository

EDITABLE_FIELDS = frozenset({"client_id", "remind_at", "kind", "channel", "message"})


@dataclass
class EditReminderUseCase:
    """
    Change a reminder's fields.

    Done reminders may be corrected too; their status and ``done_at`` are
    never touched here, so an edit cannot reopen a reminder.
    """

    reminders: ReminderRepository
    clients: ClientRepository
    clock: Clock = system_clock

    def execute(self, actor: ActorContext, reminder_id: str, fields: dict[str, Any]) -> ReminderEntity:
        unknown = set(fields) - EDITABLE_FIELDS
        if unknown:
            raise ValidationError(f"Fields cannot be edited: {', '.join(sorted(unknown))}")
        current = load_owned_reminder(self.reminders, actor, reminder_id)

        changes: dict[str, Any] = {}
        if "client_id" in fields and fields["client_id"] != current.client_id:
            changes["client_id"] = load_owned_client(self.clients, actor, fields["client_id"]).id
        if "remind_at" in fields:
            if fields["remind_at"] is None:
                raise ValidationError("remind_at is required")
            changes["remind_at"] = as_aware(fields["remind_at"], self.clock().tzinfo)
        if "kind" in fields:
            changes["kind"] = v.enum_value(ReminderKind, fields["kind"], "kind")
        if "channel" in fields:
            changes["channel"] = v.enum_value(ReminderChannel, fields["channel"], "channel")
        if "message" in fields:
            changes["message"] = v.required_text(fields["message"], "message", v.REMINDER_MESSAGE_MAX)

        updated = self.reminders.update(reminder_id, changes)
        if updated is None:
            raise NotFoundError("Reminder not found")
        return updated
