from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from payping.application.clock import Clock, system_clock
from payping.domain.entities.actor import ActorContext
from payping.domain.entities.client import ClientEntity
from payping.domain.entities.reminder import ReminderChannel, ReminderEntity, ReminderKind
from payping.domain.services.entitlement_service import EntitlementService
from payping.infrastructure.database.repositories.client_repository import ClientRepository
from payping.infrastructure.database.repositories.profile_repository import ProfileRepository
from payping.infrastructure.database.repositories.reminder_repository import ReminderRepository

SAMPLE_CLIENTS = (
    ("John Smith", "john@example.com", "VIP client, prefers email"),
    ("Sarah Johnson", "+1234567890", "WhatsApp preferred"),
    ("Mike Wilson", "mike@business.com", "Payment pending from last month"),
)

# (client index, offset from now, kind, channel, message with {name})
SAMPLE_REMINDERS = (
    (0, timedelta(hours=2), ReminderKind.FOLLOWUP, ReminderChannel.EMAIL,
     "Hi {name}! Just checking in on our conversation. Let me know if you have any questions!"),
    (1, timedelta(hours=4), ReminderKind.PAYMENT, ReminderChannel.WHATSAPP,
     "Hi {name}! This is a friendly reminder about the pending payment. "
     "Please let me know if you have any questions."),
    (2, timedelta(hours=-24), ReminderKind.PAYMENT, ReminderChannel.EMAIL,
     "Hi {name}! Your payment is overdue. Please send at your earliest convenience."),
    (0, timedelta(hours=48), ReminderKind.FOLLOWUP, ReminderChannel.EMAIL,
     "Hi {name}! Following up on our proposal. Would love to hear your thoughts."),
    (1, timedelta(hours=72), ReminderKind.FOLLOWUP, ReminderChannel.WHATSAPP,
     "Hi {name}! Hope you had a chance to review our offer. Let me know!"),
    (2, timedelta(0), ReminderKind.PAYMENT, ReminderChannel.WHATSAPP,
     "Hi {name}! Just a quick reminder about the invoice due today."),
)


@dataclass
class SeedSampleDataUseCase:
    """Fill the administrator's own account with demo clients and reminders."""

    profiles: ProfileRepository
    clients: ClientRepository
    reminders: ReminderRepository
    clock: Clock = system_clock

    def execute(self, actor: ActorContext) -> tuple[list[ClientEntity], list[ReminderEntity]]:
        EntitlementService.require_admin(actor)
        self.profiles.upsert(actor.user_id, actor.email)
        now = self.clock()
        clients = [
            self.clients.create(user_id=actor.user_id, name=name, contact=contact, notes=notes)
            for name, contact, notes in SAMPLE_CLIENTS
        ]
        reminders = [
            self.reminders.create(
                user_id=actor.user_id,
                client_id=clients[index].id,
                remind_at=now + offset,
                kind=kind,
                channel=channel,
                message=message.replace("{name}", clients[index].name),
            )
            for index, offset, kind, channel, message in SAMPLE_REMINDERS
        ]
        return clients, reminders
