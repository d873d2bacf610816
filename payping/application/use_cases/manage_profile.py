from __future__ import annotations

import logging
from dataclasses import dataclass

from payping.application.clock import Clock, system_clock
from payping.domain.entities.actor import ActorContext
from payping.domain.entities.plan import Plan
from payping.domain.entities.profile import ProfileEntity
from payping.domain.errors import NotFoundError
from payping.domain.services.entitlement_service import EntitlementService
from payping.infrastructure.database.repositories.profile_repository import ProfileRepository

logger = logging.getLogger(__name__)


def _load_profile(profiles: ProfileRepository, profile_id: str) -> ProfileEntity:
    profile = profiles.get(profile_id)
    if profile is None:
        raise NotFoundError("Profile not found")
    return profile


@dataclass
class SetProfileActiveUseCase:
    """Administrator toggle of a profile's access.

    A false -> true transition re-stamps ``activated_at``; deactivating keeps it.
    Setting the state a profile already has is a no-op.
    """

    profiles: ProfileRepository
    clock: Clock = system_clock

    def execute(self, actor: ActorContext, profile_id: str, active: bool) -> ProfileEntity:
        EntitlementService.require_admin(actor)
        current = _load_profile(self.profiles, profile_id)
        target = EntitlementService.with_active(current, active, self.clock())
        if target == current:
            return current
        updated = self.profiles.set_entitlement(profile_id, target.is_active, target.activated_at)
        if updated is None:
            raise NotFoundError("Profile not found")
        logger.info(
            "Profile %s %s by %s",
            profile_id,
            "activated" if updated.is_active else "deactivated",
            actor.user_id,
        )
        return updated


@dataclass
class SetProfilePlanUseCase:
    """Administrator plan assignment, independent of activation state."""

    profiles: ProfileRepository

    def execute(self, actor: ActorContext, profile_id: str, plan: Plan | None) -> ProfileEntity:
        EntitlementService.require_admin(actor)
        _load_profile(self.profiles, profile_id)
        updated = self.profiles.set_plan(profile_id, plan)
        if updated is None:
            raise NotFoundError("Profile not found")
        logger.info("Profile %s plan set to %s by %s", profile_id, plan.value if plan else None, actor.user_id)
        return updated


@dataclass
class ListProfilesUseCase:
    profiles: ProfileRepository

    def execute(self, actor: ActorContext) -> list[ProfileEntity]:
        EntitlementService.require_admin(actor)
        return self.profiles.list_all()


@dataclass
class ActivateDemoUseCase:
    """Demo mode: an administrator activates their own profile on the US plan."""

    profiles: ProfileRepository
    clock: Clock = system_clock

    def execute(self, actor: ActorContext) -> ProfileEntity:
        EntitlementService.require_admin(actor)
        self.profiles.upsert(actor.user_id, actor.email)
        SetProfilePlanUseCase(self.profiles).execute(actor, actor.user_id, Plan.US)
        return SetProfileActiveUseCase(self.profiles, self.clock).execute(actor, actor.user_id, True)
