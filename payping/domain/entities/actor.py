from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ActorContext:
    """Who is calling. Passed explicitly into every use case."""

    user_id: str
    email: str | None = None
    is_admin: bool = False
