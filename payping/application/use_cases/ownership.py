from __future__ import annotations

from payping.domain.entities.actor import ActorContext
from payping.domain.entities.client import ClientEntity
from payping.domain.entities.reminder import ReminderEntity
from payping.domain.errors import AuthorizationError, NotFoundError
from payping.infrastructure.database.repositories.client_repository import ClientRepository
from payping.infrastructure.database.repositories.reminder_repository import ReminderRepository


def load_owned_client(clients: ClientRepository, actor: ActorContext, client_id: str) -> ClientEntity:
    client = clients.get(client_id)
    if client is None:
        raise NotFoundError("Client not found")
    if client.user_id != actor.user_id:
        raise AuthorizationError("Client belongs to another user")
    return client


def load_owned_reminder(
    reminders: ReminderRepository, actor: ActorContext, reminder_id: str
) -> ReminderEntity:
    reminder = reminders.get(reminder_id)
    if reminder is None:
        raise NotFoundError("Reminder not found")
    if reminder.user_id != actor.user_id:
        raise AuthorizationError("Reminder belongs to another user")
    return reminder
