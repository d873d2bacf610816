from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from payping.application.clock import Clock, as_aware, system_clock
from payping.application.use_cases.ownership import load_owned_client
from payping.domain.entities.actor import ActorContext
from payping.domain.entities.reminder import ReminderChannel, ReminderEntity, ReminderKind
from payping.domain.errors import ValidationError
from payping.domain.services import validation_service as v
from payping.domain.services.message_templates import render_message
from payping.infrastructure.database.repositories.client_repository import ClientRepository
from payping.infrastructure.database.repositories.reminder_repository import ReminderRepository


@dataclass
class CreateReminderUseCase:
    reminders: ReminderRepository
    clients: ClientRepository
    clock: Clock = system_clock

    def execute(
        self,
        actor: ActorContext,
        client_id: str,
        remind_at: datetime | None,
        kind: ReminderKind | str = ReminderKind.FOLLOWUP,
        channel: ReminderChannel | str = ReminderChannel.WHATSAPP,
        message: str | None = None,
    ) -> ReminderEntity:
        """
        Schedule a pending reminder for one of the actor's clients.

        ``remind_at`` may lie in the past (backfilling). When ``message`` is
        omitted it is seeded from the template for ``(kind, channel)`` with the
        client's name filled in.
        """
        kind = v.enum_value(ReminderKind, kind, "kind")
        channel = v.enum_value(ReminderChannel, channel, "channel")
        if remind_at is None:
            raise ValidationError("remind_at is required")
        client = load_owned_client(self.clients, actor, client_id)

        if message is None:
            text = render_message(kind, channel, client.name)
        else:
            text = v.required_text(message, "message", v.REMINDER_MESSAGE_MAX)

        return self.reminders.create(
            user_id=actor.user_id,
            client_id=client.id,
            remind_at=as_aware(remind_at, self.clock().tzinfo),
            kind=kind,
            channel=channel,
            message=text,
        )
