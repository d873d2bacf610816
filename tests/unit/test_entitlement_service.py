from datetime import datetime, timezone

import pytest

from payping.application.use_cases.manage_profile import (
    ActivateDemoUseCase,
    ListProfilesUseCase,
    SetProfileActiveUseCase,
    SetProfilePlanUseCase,
)
from payping.domain.entities.actor import ActorContext
from payping.domain.entities.plan import Plan
from payping.domain.entities.profile import ProfileEntity
from payping.domain.errors import AuthorizationError, NotFoundError
from payping.domain.services.entitlement_service import EntitlementService
from payping.infrastructure.database.repositories.profile_repository import ProfileRepository

T1 = datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc)
T2 = datetime(2024, 2, 1, 9, 0, tzinfo=timezone.utc)

ADMIN = ActorContext(user_id="admin-1", email="admin@example.com", is_admin=True)
USER = ActorContext(user_id="user-1", email="user@example.com")


def test_is_entitled():
    assert EntitlementService.is_entitled(ProfileEntity(id="p", email=None, is_active=True))
    assert not EntitlementService.is_entitled(ProfileEntity(id="p", email=None))
    assert not EntitlementService.is_entitled(None)


def test_activation_stamps_and_deactivation_keeps_timestamp():
    p = ProfileEntity(id="p", email=None)
    on = EntitlementService.with_active(p, True, T1)
    assert on.is_active and on.activated_at == T1

    off = EntitlementService.with_active(on, False, T2)
    assert not off.is_active and off.activated_at == T1

    again = EntitlementService.with_active(off, True, T2)
    assert again.activated_at == T2


def test_setting_same_state_is_noop():
    p = ProfileEntity(id="p", email=None, is_active=True, activated_at=T1)
    assert EntitlementService.with_active(p, True, T2) is p


def test_new_profile_is_inactive_without_plan():
    prof = ProfileRepository(None).upsert("user-1", "user@example.com")
    assert prof.is_active is False
    assert prof.plan is None
    assert prof.activated_at is None


def test_upsert_does_not_reset_entitlement():
    profiles = ProfileRepository(None)
    profiles.upsert("user-1", "user@example.com")
    SetProfileActiveUseCase(profiles, clock=lambda: T1).execute(ADMIN, "user-1", True)
    again = profiles.upsert("user-1", "user@example.com")
    assert again.is_active is True
    assert again.activated_at == T1


def test_admin_toggle_and_plan():
    profiles = ProfileRepository(None)
    profiles.upsert("user-1", "user@example.com")

    active = SetProfileActiveUseCase(profiles, clock=lambda: T1).execute(ADMIN, "user-1", True)
    assert active.is_active and active.activated_at == T1
    assert active.plan is None

    planned = SetProfilePlanUseCase(profiles).execute(ADMIN, "user-1", Plan.EA)
    assert planned.plan == Plan.EA and planned.is_active

    inactive = SetProfileActiveUseCase(profiles, clock=lambda: T2).execute(ADMIN, "user-1", False)
    assert not inactive.is_active
    assert inactive.plan == Plan.EA
    assert inactive.activated_at == T1


def test_non_admin_cannot_manage_profiles():
    profiles = ProfileRepository(None)
    profiles.upsert("user-1", "user@example.com")
    with pytest.raises(AuthorizationError):
        SetProfileActiveUseCase(profiles).execute(USER, "user-1", True)
    with pytest.raises(AuthorizationError):
        SetProfilePlanUseCase(profiles).execute(USER, "user-1", Plan.US)
    with pytest.raises(AuthorizationError):
        ListProfilesUseCase(profiles).execute(USER)
    assert profiles.get("user-1").is_active is False


def test_unknown_profile_is_not_found():
    with pytest.raises(NotFoundError):
        SetProfileActiveUseCase(ProfileRepository(None)).execute(ADMIN, "missing", True)


def test_demo_activates_admin_on_us_plan():
    profiles = ProfileRepository(None)
    prof = ActivateDemoUseCase(profiles, clock=lambda: T1).execute(ADMIN)
    assert prof.id == ADMIN.user_id
    assert prof.is_active and prof.plan == Plan.US and prof.activated_at == T1
