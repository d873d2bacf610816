from __future__ import annotations

import logging
from dataclasses import dataclass

from payping.domain.entities.activation_request import ActivationRequestEntity
from payping.domain.entities.actor import ActorContext
from payping.domain.entities.plan import Plan
from payping.domain.services import validation_service as v
from payping.infrastructure.database.repositories.activation_request_repository import (
    ActivationRequestRepository,
)
from payping.infrastructure.database.repositories.profile_repository import ProfileRepository

logger = logging.getLogger(__name__)


@dataclass
class SubmitActivationRequestUseCase:
    """
    Record a claim of payment for review.

    Every call creates a new pending request; earlier requests (pending or
    resolved) are kept as history and never merged.
    """

    requests: ActivationRequestRepository
    profiles: ProfileRepository

    def execute(
        self,
        actor: ActorContext,
        plan_requested: Plan | str,
        method: str,
        reference: str,
        amount: str,
        note: str | None = None,
    ) -> ActivationRequestEntity:
        plan = v.enum_value(Plan, plan_requested, "plan_requested")
        method = v.required_text(method, "method")
        reference = v.required_text(reference, "reference")
        amount = v.required_text(amount, "amount")
        note = v.optional_text(note, "note")

        self.profiles.upsert(actor.user_id, actor.email)
        entity = self.requests.create(
            user_id=actor.user_id,
            plan_requested=plan,
            method=method,
            reference=reference,
            amount=amount,
            note=note,
        )
        logger.info("Activation request %s submitted by %s for plan %s", entity.id, actor.user_id, plan.value)
        return entity


@dataclass
class ListOwnActivationRequestsUseCase:
    requests: ActivationRequestRepository

    def execute(self, actor: ActorContext) -> list[ActivationRequestEntity]:
        return self.requests.list_requests(user_id=actor.user_id)
