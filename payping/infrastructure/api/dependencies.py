from __future__ import annotations

from typing import Annotated

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from payping.domain.entities.actor import ActorContext
from payping.domain.services.entitlement_service import EntitlementService
from payping.infrastructure.database.repositories.activation_request_repository import (
    ActivationRequestRepository,
)
from payping.infrastructure.database.repositories.client_repository import ClientRepository
from payping.infrastructure.database.repositories.profile_repository import ProfileRepository
from payping.infrastructure.database.repositories.reminder_repository import ReminderRepository
from payping.infrastructure.database.supabase_client import (
    SupabaseAuthAdapter,
    UserInfo,
    get_supabase_client,
)

_bearer_scheme = HTTPBearer(auto_error=False)


def get_auth_adapter() -> SupabaseAuthAdapter:
    return SupabaseAuthAdapter()


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Security(_bearer_scheme)] = None,
    auth: Annotated[SupabaseAuthAdapter, Depends(get_auth_adapter)] = None,
) -> UserInfo:
    if not credentials or not credentials.scheme or credentials.scheme.lower() != "bearer":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing bearer token")
    token = credentials.credentials
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing bearer token")
    try:
        return auth.validate_token(token)
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc))


def get_profile_repo() -> ProfileRepository:
    return ProfileRepository(get_supabase_client())


def get_activation_request_repo() -> ActivationRequestRepository:
    return ActivationRequestRepository(get_supabase_client())


def get_client_repo() -> ClientRepository:
    return ClientRepository(get_supabase_client())


def get_reminder_repo() -> ReminderRepository:
    return ReminderRepository(get_supabase_client())


def get_actor_context(
    user: Annotated[UserInfo, Depends(get_current_user)],
    profiles: Annotated[ProfileRepository, Depends(get_profile_repo)],
) -> ActorContext:
    """Authenticated caller; makes sure a profile row exists for them."""
    profiles.upsert(user.id, user.email)
    return ActorContext(user_id=user.id, email=user.email, is_admin=user.is_admin)


def require_entitled_actor(
    actor: Annotated[ActorContext, Depends(get_actor_context)],
    profiles: Annotated[ProfileRepository, Depends(get_profile_repo)],
) -> ActorContext:
    """Gate for client and reminder features: the profile must be active."""
    if not EntitlementService.is_entitled(profiles.get(actor.user_id)):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account not activated. Submit a payment to activate it.",
        )
    return actor
