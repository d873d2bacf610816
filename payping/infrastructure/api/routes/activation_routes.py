from __future__ import annotations

from fastapi import APIRouter, Depends, status

from payping.application.dtos.activation_dto import (
    ActivationRequestItem,
    ListActivationRequestsResponse,
    SubmitActivationRequestBody,
)
from payping.application.use_cases.submit_activation_request import (
    ListOwnActivationRequestsUseCase,
    SubmitActivationRequestUseCase,
)
from payping.domain.entities.actor import ActorContext
from payping.infrastructure.api.dependencies import (
    get_activation_request_repo,
    get_actor_context,
    get_profile_repo,
)
from payping.infrastructure.database.repositories.activation_request_repository import (
    ActivationRequestRepository,
)
from payping.infrastructure.database.repositories.profile_repository import ProfileRepository

router = APIRouter(
    prefix="/activation",
    tags=["Activation"],
    responses={
        400: {"description": "Bad Request - Missing or invalid payment details"},
        401: {"description": "Unauthorized - Invalid or missing authentication token"},
        422: {"description": "Validation Error - Invalid request format"},
    },
)


@router.post(
    "/requests",
    response_model=ActivationRequestItem,
    status_code=status.HTTP_201_CREATED,
    summary="Submit Activation Request",
    description="""
    Submit proof of a manual payment for administrator review.

    **Behavior:**
    - Always creates a new pending request; earlier requests are kept
    - The account stays inactive until an administrator approves

    **Authentication required**: Yes (Bearer token). Inactive users may call this.
    """,
)
def submit_request(
    body: SubmitActivationRequestBody,
    actor: ActorContext = Depends(get_actor_context),
    requests: ActivationRequestRepository = Depends(get_activation_request_repo),
    profiles: ProfileRepository = Depends(get_profile_repo),
):
    entity = SubmitActivationRequestUseCase(requests, profiles).execute(
        actor,
        plan_requested=body.plan_requested,
        method=body.method,
        reference=body.reference,
        amount=body.amount,
        note=body.note,
    )
    return ActivationRequestItem.from_entity(entity)


@router.get(
    "/requests",
    response_model=ListActivationRequestsResponse,
    summary="List Own Activation Requests",
    description="The caller's activation requests, newest first.",
)
def list_own_requests(
    actor: ActorContext = Depends(get_actor_context),
    requests: ActivationRequestRepository = Depends(get_activation_request_repo),
):
    items = ListOwnActivationRequestsUseCase(requests).execute(actor)
    return ListActivationRequestsResponse(requests=[ActivationRequestItem.from_entity(r) for r in items])
