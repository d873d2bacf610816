from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from payping.application.use_cases.list_reminders import ReminderWithClient
from payping.domain.entities.reminder import ReminderChannel, ReminderKind, ReminderStatus
from payping.domain.services.bucketing_service import Bucket


class CreateReminderBody(BaseModel):
    client_id: str
    remind_at: datetime = Field(..., description="When to contact the client; past values are allowed")
    kind: ReminderKind = ReminderKind.FOLLOWUP
    channel: ReminderChannel = ReminderChannel.WHATSAPP
    message: str | None = Field(
        None, max_length=1000, description="Defaults to the template for kind and channel"
    )


class UpdateReminderBody(BaseModel):
    model_config = ConfigDict(extra="forbid")

    client_id: str | None = None
    remind_at: datetime | None = None
    kind: ReminderKind | None = None
    channel: ReminderChannel | None = None
    message: str | None = Field(None, max_length=1000)


class ReminderClient(BaseModel):
    id: str
    name: str
    contact: str


class ReminderItem(BaseModel):
    id: str
    client_id: str
    client: ReminderClient | None = None
    remind_at: datetime
    kind: ReminderKind
    channel: ReminderChannel
    message: str
    status: ReminderStatus
    done_at: datetime | None = None
    created_at: datetime
    bucket: Bucket = Field(..., description="Classification relative to the current time")

    @classmethod
    def from_view(cls, item: ReminderWithClient) -> ReminderItem:
        r, c = item.reminder, item.client
        return cls(
            id=r.id,
            client_id=r.client_id,
            client=ReminderClient(id=c.id, name=c.name, contact=c.contact) if c else None,
            remind_at=r.remind_at,
            kind=r.kind,
            channel=r.channel,
            message=r.message,
            status=r.status,
            done_at=r.done_at,
            created_at=r.created_at,
            bucket=item.bucket,
        )


class ListRemindersResponse(BaseModel):
    reminders: list[ReminderItem]
    total: int = Field(..., ge=0)


class ReminderMessageResponse(BaseModel):
    """Text to copy into WhatsApp or email."""
    channel: ReminderChannel
    contact: str
    message: str


class DeleteReminderResponse(BaseModel):
    ok: bool = True
