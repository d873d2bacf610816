from __future__ import annotations

from dataclasses import replace
from datetime import datetime

from payping.domain.entities.actor import ActorContext
from payping.domain.entities.plan import Plan
from payping.domain.entities.profile import ProfileEntity
from payping.domain.errors import AuthorizationError


class EntitlementService:
    """Pure rules for a profile's access to the protected area."""

    @staticmethod
    def is_entitled(profile: ProfileEntity | None) -> bool:
        return profile is not None and profile.is_active is True

    @staticmethod
    def require_admin(actor: ActorContext) -> None:
        if not actor.is_admin:
            raise AuthorizationError("Administrator role required")

    @staticmethod
    def with_active(profile: ProfileEntity, active: bool, now: datetime) -> ProfileEntity:
        # activated_at is re-stamped on every false -> true transition and
        # left alone on deactivation.
        if active and not profile.is_active:
            return replace(profile, is_active=True, activated_at=now)
        if not active and profile.is_active:
            return replace(profile, is_active=False)
        return profile

    @staticmethod
    def with_plan(profile: ProfileEntity, plan: Plan | None) -> ProfileEntity:
        return replace(profile, plan=plan)

    @staticmethod
    def with_approval(profile: ProfileEntity, plan: Plan, now: datetime) -> ProfileEntity:
        return replace(profile, is_active=True, plan=plan, activated_at=now)
