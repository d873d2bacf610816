from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from payping.domain.entities.client import ClientEntity


class CreateClientBody(BaseModel):
    name: str = Field(..., max_length=100, examples=["Sarah Johnson"])
    contact: str = Field(..., max_length=100, description="Email or phone number", examples=["+1234567890"])
    notes: str | None = Field(None, max_length=500)


class UpdateClientBody(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(None, max_length=100)
    contact: str | None = Field(None, max_length=100)
    notes: str | None = Field(None, max_length=500)


class ClientItem(BaseModel):
    id: str
    name: str
    contact: str
    contact_type: str = Field(..., description="'email' when contact contains '@', else 'phone'")
    notes: str | None = None
    created_at: datetime

    @classmethod
    def from_entity(cls, entity: ClientEntity) -> ClientItem:
        return cls(
            id=entity.id,
            name=entity.name,
            contact=entity.contact,
            contact_type=entity.contact_type,
            notes=entity.notes,
            created_at=entity.created_at,
        )


class ListClientsResponse(BaseModel):
    clients: list[ClientItem]
    total: int = Field(..., ge=0)


class DeleteClientResponse(BaseModel):
    ok: bool = Field(True, description="Indicates whether the deletion was successful")
