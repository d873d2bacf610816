from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from payping.application.use_cases.ownership import load_owned_client
from payping.domain.entities.actor import ActorContext
from payping.domain.entities.client import ClientEntity
from payping.domain.errors import NotFoundError
from payping.domain.services import validation_service as v
from payping.infrastructure.database.repositories.client_repository import ClientRepository

logger = logging.getLogger(__name__)


@dataclass
class CreateClientUseCase:
    clients: ClientRepository

    def execute(
        self, actor: ActorContext, name: str, contact: str, notes: str | None = None
    ) -> ClientEntity:
        return self.clients.create(
            user_id=actor.user_id,
            name=v.required_text(name, "name", v.CLIENT_NAME_MAX),
            contact=v.required_text(contact, "contact", v.CLIENT_CONTACT_MAX),
            notes=v.optional_text(notes, "notes", v.CLIENT_NOTES_MAX),
        )


@dataclass
class UpdateClientUseCase:
    clients: ClientRepository

    def execute(self, actor: ActorContext, client_id: str, fields: dict[str, Any]) -> ClientEntity:
        load_owned_client(self.clients, actor, client_id)
        changes: dict[str, Any] = {}
        if "name" in fields:
            changes["name"] = v.required_text(fields["name"], "name", v.CLIENT_NAME_MAX)
        if "contact" in fields:
            changes["contact"] = v.required_text(fields["contact"], "contact", v.CLIENT_CONTACT_MAX)
        if "notes" in fields:
            changes["notes"] = v.optional_text(fields["notes"], "notes", v.CLIENT_NOTES_MAX)
        updated = self.clients.update(client_id, changes)
        if updated is None:
            raise NotFoundError("Client not found")
        return updated


@dataclass
class DeleteClientUseCase:
    """Delete a client. The store cascades the delete to its reminders."""

    clients: ClientRepository

    def execute(self, actor: ActorContext, client_id: str) -> bool:
        load_owned_client(self.clients, actor, client_id)
        ok = self.clients.delete(client_id)
        logger.info("Client %s deleted by %s", client_id, actor.user_id)
        return ok


@dataclass
class GetClientUseCase:
    clients: ClientRepository

    def execute(self, actor: ActorContext, client_id: str) -> ClientEntity:
        return load_owned_client(self.clients, actor, client_id)


@dataclass
class ListClientsUseCase:
    clients: ClientRepository

    def execute(self, actor: ActorContext, search: str | None = None) -> list[ClientEntity]:
        """Own clients newest first; ``search`` matches name or contact, case-insensitively."""
        items = self.clients.list_by_user(actor.user_id)
        query = (search or "").strip().lower()
        if not query:
            return items
        return [c for c in items if query in c.name.lower() or query in c.contact.lower()]
