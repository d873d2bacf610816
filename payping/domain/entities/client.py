from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class ClientEntity:
    id: str
    user_id: str
    name: str
    contact: str  # email or phone
    created_at: datetime
    notes: str | None = None

    @property
    def contact_type(self) -> str:
        return "email" if "@" in self.contact else "phone"
