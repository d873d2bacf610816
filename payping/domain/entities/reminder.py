from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class ReminderKind(str, Enum):
    FOLLOWUP = "followup"
    PAYMENT = "payment"


class ReminderChannel(str, Enum):
    WHATSAPP = "whatsapp"
    EMAIL = "email"


class ReminderStatus(str, Enum):
    PENDING = "pending"
    DONE = "done"


@dataclass(frozen=True)
class ReminderEntity:
    id: str
    user_id: str
    client_id: str
    remind_at: datetime
    kind: ReminderKind
    channel: ReminderChannel
    message: str
    status: ReminderStatus
    created_at: datetime
    done_at: datetime | None = None

    @property
    def is_done(self) -> bool:
        return self.status == ReminderStatus.DONE
