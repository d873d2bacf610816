from __future__ import annotations

from fastapi import APIRouter, Depends, status

from payping.application.dtos.profile_dto import ProfileResponse, ValidateTokenResponse
from payping.domain.entities.actor import ActorContext
from payping.domain.errors import NotFoundError
from payping.infrastructure.api.dependencies import get_actor_context, get_profile_repo
from payping.infrastructure.database.repositories.profile_repository import ProfileRepository

router = APIRouter(
    prefix="/auth",
    tags=["Authentication"],
    responses={
        401: {"description": "Unauthorized - Invalid or missing authentication token"},
        422: {"description": "Validation Error - Invalid request format"},
    },
)


def _own_profile(actor: ActorContext, profiles: ProfileRepository):
    prof = profiles.get(actor.user_id)
    if prof is None:
        raise NotFoundError("Profile not found")
    return prof


@router.post(
    "/validate",
    response_model=ValidateTokenResponse,
    status_code=status.HTTP_200_OK,
    summary="Validate Authentication Token",
    description="""
    Validate the provided JWT token and ensure the user profile exists.

    This endpoint:
    - Verifies the JWT token in the Authorization header
    - Creates the user profile on first sign-in (inactive, no plan)
    - Returns basic user information and activation state

    **Authentication required**: Yes (Bearer token)
    """,
    response_description="User information confirming valid authentication",
)
def validate_token(
    actor: ActorContext = Depends(get_actor_context),
    profiles: ProfileRepository = Depends(get_profile_repo),
):
    """Validate JWT token and ensure user profile exists."""
    prof = _own_profile(actor, profiles)
    return ValidateTokenResponse(user_id=prof.id, email=prof.email, is_active=prof.is_active)


@router.get(
    "/me",
    response_model=ProfileResponse,
    status_code=status.HTTP_200_OK,
    summary="Get Current User Profile",
    description="""
    Retrieve the profile of the currently authenticated user.

    This endpoint returns:
    - User ID and email
    - Activation state, plan and activation timestamp
    - Whether the user is an administrator

    **Authentication required**: Yes (Bearer token)
    """,
    response_description="Complete user profile information",
)
def get_me(
    actor: ActorContext = Depends(get_actor_context),
    profiles: ProfileRepository = Depends(get_profile_repo),
):
    """Get current user's profile information."""
    return ProfileResponse.from_entity(_own_profile(actor, profiles), is_admin=actor.is_admin)
