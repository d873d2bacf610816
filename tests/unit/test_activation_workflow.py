import threading
from datetime import datetime, timezone
from unittest import mock

import pytest

from payping.application.use_cases.resolve_activation_request import (
    ListActivationRequestsUseCase,
    ResolveActivationRequestUseCase,
)
from payping.application.use_cases.submit_activation_request import (
    ListOwnActivationRequestsUseCase,
    SubmitActivationRequestUseCase,
)
from payping.domain.entities.activation_request import RequestStatus
from payping.domain.entities.actor import ActorContext
from payping.domain.entities.plan import Plan
from payping.domain.errors import (
    AuthorizationError,
    ConflictError,
    NotFoundError,
    TransactionError,
    ValidationError,
)
from payping.domain.services.entitlement_service import EntitlementService
from payping.infrastructure.database.repositories.activation_request_repository import (
    ActivationRequestRepository,
)
from payping.infrastructure.database.repositories.profile_repository import ProfileRepository

NOW = datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc)
ADMIN = ActorContext(user_id="admin-1", is_admin=True)
USER = ActorContext(user_id="user-1", email="user@example.com")


@pytest.fixture()
def repos():
    return ActivationRequestRepository(None), ProfileRepository(None)


def submit(repos, plan, reference="REF-1"):
    requests, profiles = repos
    return SubmitActivationRequestUseCase(requests, profiles).execute(
        USER, plan_requested=plan, method="M-Pesa", reference=reference, amount="10 USD"
    )


def resolve(repos, request_id, decision, actor=ADMIN):
    return ResolveActivationRequestUseCase(repos[0], clock=lambda: NOW).execute(actor, request_id, decision)


def test_submit_creates_pending_request_and_profile(repos):
    req = submit(repos, Plan.US)
    assert req.status == RequestStatus.PENDING
    assert req.reviewed_at is None and req.reviewed_by is None
    prof = repos[1].get(USER.user_id)
    assert prof is not None and prof.is_active is False


def test_submit_requires_payment_details(repos):
    requests, profiles = repos
    with pytest.raises(ValidationError):
        SubmitActivationRequestUseCase(requests, profiles).execute(
            USER, plan_requested=Plan.US, method="PayPal", reference="  ", amount="29"
        )
    with pytest.raises(ValidationError):
        SubmitActivationRequestUseCase(requests, profiles).execute(
            USER, plan_requested="GOLD", method="PayPal", reference="x", amount="29"
        )
    assert requests.list_requests() == []


def test_approving_one_request_leaves_other_pending(repos):
    r1 = submit(repos, Plan.US, "R1")
    r2 = submit(repos, Plan.EA, "R2")
    assert {r.status for r in ListOwnActivationRequestsUseCase(repos[0]).execute(USER)} == {
        RequestStatus.PENDING
    }

    result = resolve(repos, r2.id, "approved")

    assert result.request.status == RequestStatus.APPROVED
    assert result.request.reviewed_by == ADMIN.user_id
    assert result.request.reviewed_at == NOW
    assert result.profile.is_active is True
    assert result.profile.plan == Plan.EA
    assert result.profile.activated_at == NOW
    assert repos[0].get(r1.id).status == RequestStatus.PENDING
    assert repos[1].get(USER.user_id).plan == Plan.EA


def test_reject_leaves_profile_untouched(repos):
    req = submit(repos, Plan.US)
    before = repos[1].get(USER.user_id)

    result = resolve(repos, req.id, RequestStatus.REJECTED)

    assert result.request.status == RequestStatus.REJECTED
    assert result.profile is None
    assert repos[1].get(USER.user_id) == before


def test_request_resolves_only_once(repos):
    req = submit(repos, Plan.US)
    resolve(repos, req.id, "rejected")
    with pytest.raises(ConflictError):
        resolve(repos, req.id, "approved")
    assert repos[0].get(req.id).status == RequestStatus.REJECTED
    assert repos[1].get(USER.user_id).is_active is False


def test_repository_rechecks_pending_state(repos):
    req = submit(repos, Plan.US)
    repos[0].resolve(req.id, RequestStatus.APPROVED, "admin-1", NOW)
    with pytest.raises(ConflictError):
        repos[0].resolve(req.id, RequestStatus.REJECTED, "admin-2", NOW)


def test_approval_rolls_back_when_profile_missing(repos, clean_store):
    req = submit(repos, Plan.EA)
    # simulate the owning profile vanishing between submit and review
    clean_store.tables["profiles"].pop(USER.user_id)

    with pytest.raises(TransactionError):
        resolve(repos, req.id, "approved")

    current = repos[0].get(req.id)
    assert current.status == RequestStatus.PENDING
    assert current.reviewed_at is None


def test_non_admin_cannot_resolve(repos):
    req = submit(repos, Plan.US)
    with pytest.raises(AuthorizationError):
        resolve(repos, req.id, "approved", actor=USER)
    assert repos[0].get(req.id).status == RequestStatus.PENDING
    assert repos[1].get(USER.user_id).is_active is False


def test_invalid_decision_and_missing_request(repos):
    req = submit(repos, Plan.US)
    with pytest.raises(ValidationError):
        resolve(repos, req.id, "pending")
    with pytest.raises(ValidationError):
        resolve(repos, req.id, "maybe")
    with pytest.raises(NotFoundError):
        resolve(repos, "req_missing", "approved")


def test_admin_queue_includes_profiles_and_filters_by_status(repos):
    first = submit(repos, Plan.US, "A")
    submit(repos, Plan.EA, "B")
    resolve(repos, first.id, "approved")

    listing = ListActivationRequestsUseCase(*repos).execute(ADMIN)
    assert len(listing) == 2
    assert all(profile.id == USER.user_id for _, profile in listing)

    pending = ListActivationRequestsUseCase(*repos).execute(ADMIN, status=RequestStatus.PENDING)
    assert [r.reference for r, _ in pending] == ["B"]

    with pytest.raises(AuthorizationError):
        ListActivationRequestsUseCase(*repos).execute(USER)


def test_unexpected_failure_during_approval_rolls_back(repos):
    req = submit(repos, Plan.US)
    boom = mock.Mock(side_effect=OSError("disk full"))
    with mock.patch.object(EntitlementService, "with_approval", boom):
        with pytest.raises(TransactionError):
            resolve(repos, req.id, "approved")
    boom.assert_called_once()
    assert repos[0].get(req.id).status == RequestStatus.PENDING
    assert repos[1].get(USER.user_id).is_active is False


def test_readers_never_see_half_approved_request(repos):
    req = submit(repos, Plan.US)
    requests, profiles = repos
    seen = {}
    approve = EntitlementService.with_approval

    def read_state():
        seen["request"] = requests.get(req.id).status
        seen["active"] = profiles.get(USER.user_id).is_active

    reader = threading.Thread(target=read_state)

    def approve_while_reading(profile, plan, now):
        # request row already written, profile not yet
        reader.start()
        reader.join(timeout=0.2)
        seen["blocked"] = reader.is_alive()
        return approve(profile, plan, now)

    with mock.patch.object(EntitlementService, "with_approval", side_effect=approve_while_reading):
        resolve(repos, req.id, "approved")
    reader.join(timeout=5)

    assert seen["blocked"] is True
    assert (seen["request"], seen["active"]) == (RequestStatus.APPROVED, True)
