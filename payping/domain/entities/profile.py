from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from payping.domain.entities.plan import Plan


@dataclass(frozen=True)
class ProfileEntity:
    id: str  # user id from Supabase auth
    email: str | None
    is_active: bool = False
    plan: Plan | None = None
    activated_at: datetime | None = None  # last false -> true transition, never cleared
    created_at: datetime | None = None
