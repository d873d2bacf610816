from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from payping.application.dtos.activation_dto import (
    ActivationRequestItem,
    ListActivationRequestsResponse,
    ResolveRequestBody,
    ResolveRequestResponse,
)
from payping.application.dtos.client_dto import ClientItem, ListClientsResponse
from payping.application.dtos.profile_dto import (
    ListProfilesResponse,
    ProfileResponse,
    SetActiveBody,
    SetPlanBody,
)
from payping.application.use_cases.manage_profile import (
    ActivateDemoUseCase,
    ListProfilesUseCase,
    SetProfileActiveUseCase,
    SetProfilePlanUseCase,
)
from payping.application.use_cases.resolve_activation_request import (
    ListActivationRequestsUseCase,
    ResolveActivationRequestUseCase,
)
from payping.application.use_cases.seed_sample_data import SeedSampleDataUseCase
from payping.domain.entities.activation_request import RequestStatus
from payping.domain.entities.actor import ActorContext
from payping.infrastructure.api.dependencies import (
    get_activation_request_repo,
    get_actor_context,
    get_client_repo,
    get_profile_repo,
    get_reminder_repo,
)
from payping.infrastructure.database.repositories.activation_request_repository import (
    ActivationRequestRepository,
)
from payping.infrastructure.database.repositories.client_repository import ClientRepository
from payping.infrastructure.database.repositories.profile_repository import ProfileRepository
from payping.infrastructure.database.repositories.reminder_repository import ReminderRepository

router = APIRouter(
    prefix="/admin",
    tags=["Administration"],
    responses={
        401: {"description": "Unauthorized - Invalid or missing authentication token"},
        403: {"description": "Forbidden - Administrator role required"},
        404: {"description": "Not Found - Profile or request does not exist"},
        422: {"description": "Validation Error - Invalid request format"},
    },
)


@router.get("/profiles", response_model=ListProfilesResponse, summary="List Profiles")
def list_profiles(
    actor: ActorContext = Depends(get_actor_context),
    profiles: ProfileRepository = Depends(get_profile_repo),
):
    items = ListProfilesUseCase(profiles).execute(actor)
    return ListProfilesResponse(profiles=[ProfileResponse.from_entity(p) for p in items])


@router.patch(
    "/profiles/{profile_id}/active",
    response_model=ProfileResponse,
    summary="Activate or Deactivate a Profile",
    description="""
    Toggle a user's access.

    - Activating an inactive profile stamps `activated_at` with the current time
    - Deactivating keeps `activated_at` and the plan
    - Setting the state a profile already has changes nothing
    """,
)
def set_profile_active(
    profile_id: str,
    body: SetActiveBody,
    actor: ActorContext = Depends(get_actor_context),
    profiles: ProfileRepository = Depends(get_profile_repo),
):
    updated = SetProfileActiveUseCase(profiles).execute(actor, profile_id, body.is_active)
    return ProfileResponse.from_entity(updated)


@router.patch("/profiles/{profile_id}/plan", response_model=ProfileResponse, summary="Set a Profile's Plan")
def set_profile_plan(
    profile_id: str,
    body: SetPlanBody,
    actor: ActorContext = Depends(get_actor_context),
    profiles: ProfileRepository = Depends(get_profile_repo),
):
    updated = SetProfilePlanUseCase(profiles).execute(actor, profile_id, body.plan)
    return ProfileResponse.from_entity(updated)


@router.post(
    "/demo",
    response_model=ProfileResponse,
    summary="Activate Demo Mode",
    description="Activate the calling administrator's own profile on the US plan.",
)
def activate_demo(
    actor: ActorContext = Depends(get_actor_context),
    profiles: ProfileRepository = Depends(get_profile_repo),
):
    return ProfileResponse.from_entity(ActivateDemoUseCase(profiles).execute(actor))


@router.post(
    "/seed",
    response_model=ListClientsResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Seed Sample Data",
    description="Create three sample clients with six reminders in the caller's own account.",
)
def seed_sample_data(
    actor: ActorContext = Depends(get_actor_context),
    profiles: ProfileRepository = Depends(get_profile_repo),
    clients: ClientRepository = Depends(get_client_repo),
    reminders: ReminderRepository = Depends(get_reminder_repo),
):
    created, _ = SeedSampleDataUseCase(profiles, clients, reminders).execute(actor)
    return ListClientsResponse(clients=[ClientItem.from_entity(c) for c in created], total=len(created))


@router.get(
    "/activation-requests",
    response_model=ListActivationRequestsResponse,
    summary="List Activation Requests",
    description="Review queue, newest first, each request with its owner's profile.",
)
def list_activation_requests(
    actor: ActorContext = Depends(get_actor_context),
    requests: ActivationRequestRepository = Depends(get_activation_request_repo),
    profiles: ProfileRepository = Depends(get_profile_repo),
    status_filter: RequestStatus | None = Query(None, alias="status", description="Only requests in this state"),
):
    items = ListActivationRequestsUseCase(requests, profiles).execute(actor, status=status_filter)
    return ListActivationRequestsResponse(
        requests=[
            ActivationRequestItem.from_entity(r, ProfileResponse.from_entity(p) if p else None)
            for r, p in items
        ]
    )


@router.post(
    "/activation-requests/{request_id}/resolve",
    response_model=ResolveRequestResponse,
    summary="Resolve Activation Request",
    description="""
    Approve or reject a pending request.

    **Behavior:**
    - Approval activates the owner's profile on the requested plan in the same transaction
    - Rejection leaves the profile unchanged
    - A request that is already resolved cannot be resolved again (409)
    """,
    responses={409: {"description": "Conflict - Request already resolved or the write was rolled back"}},
)
def resolve_activation_request(
    request_id: str,
    body: ResolveRequestBody,
    actor: ActorContext = Depends(get_actor_context),
    requests: ActivationRequestRepository = Depends(get_activation_request_repo),
):
    result = ResolveActivationRequestUseCase(requests).execute(actor, request_id, body.decision)
    return ResolveRequestResponse(
        request=ActivationRequestItem.from_entity(result.request),
        profile=ProfileResponse.from_entity(result.profile) if result.profile else None,
    )
