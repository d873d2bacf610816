from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from payping.domain.entities.plan import Plan


class RequestStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


@dataclass(frozen=True)
class ActivationRequestEntity:
    id: str
    user_id: str  # owning profile; reviewed by a different actor
    plan_requested: Plan
    method: str
    reference: str
    amount: str
    status: RequestStatus
    created_at: datetime
    note: str | None = None
    reviewed_at: datetime | None = None
    reviewed_by: str | None = None

    @property
    def is_pending(self) -> bool:
        return self.status == RequestStatus.PENDING
