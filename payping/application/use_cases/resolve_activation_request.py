from __future__ import annotations

import logging
from dataclasses import dataclass

from payping.application.clock import Clock, system_clock
from payping.domain.entities.activation_request import ActivationRequestEntity, RequestStatus
from payping.domain.entities.actor import ActorContext
from payping.domain.entities.profile import ProfileEntity
from payping.domain.errors import ConflictError, NotFoundError, ValidationError
from payping.domain.services.entitlement_service import EntitlementService
from payping.infrastructure.database.repositories.activation_request_repository import (
    ActivationRequestRepository,
)
from payping.infrastructure.database.repositories.profile_repository import ProfileRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Resolution:
    request: ActivationRequestEntity
    profile: ProfileEntity | None  # set only when the request was approved


@dataclass
class ResolveActivationRequestUseCase:
    """
    Approve or reject a pending activation request.

    Approval writes the request and activates the owning profile in one
    store transaction; rejection touches the request only. A request can be
    resolved exactly once.
    """

    requests: ActivationRequestRepository
    clock: Clock = system_clock

    def execute(
        self, actor: ActorContext, request_id: str, decision: RequestStatus | str
    ) -> Resolution:
        EntitlementService.require_admin(actor)
        try:
            decision = RequestStatus(decision)
        except ValueError as exc:
            raise ValidationError("decision must be 'approved' or 'rejected'") from exc
        if decision == RequestStatus.PENDING:
            raise ValidationError("decision must be 'approved' or 'rejected'")

        current = self.requests.get(request_id)
        if current is None:
            raise NotFoundError("Activation request not found")
        if not current.is_pending:
            raise ConflictError(f"Activation request already {current.status.value}")

        # The repository re-checks the pending state inside the transaction
        request, profile = self.requests.resolve(request_id, decision, actor.user_id, self.clock())
        logger.info("Activation request %s %s by %s", request_id, decision.value, actor.user_id)
        return Resolution(request=request, profile=profile)


@dataclass
class ListActivationRequestsUseCase:
    """Administrator queue: requests newest first, each with its owner's profile."""

    requests: ActivationRequestRepository
    profiles: ProfileRepository

    def execute(
        self, actor: ActorContext, status: RequestStatus | None = None
    ) -> list[tuple[ActivationRequestEntity, ProfileEntity | None]]:
        EntitlementService.require_admin(actor)
        items = self.requests.list_requests(status=status)
        profiles = {p.id: p for p in self.profiles.list_all()}
        return [(item, profiles.get(item.user_id)) for item in items]
