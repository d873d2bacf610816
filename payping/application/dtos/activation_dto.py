from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from payping.application.dtos.profile_dto import ProfileResponse
from payping.domain.entities.activation_request import ActivationRequestEntity, RequestStatus
from payping.domain.entities.plan import Plan


class SubmitActivationRequestBody(BaseModel):
    """Proof of a manual payment, submitted for administrator review."""
    plan_requested: Plan = Field(..., description="Plan the user paid for")
    method: str = Field(..., max_length=100, description="Payment channel used", examples=["M-Pesa"])
    reference: str = Field(..., max_length=200, description="Transaction reference or proof", examples=["QHX12ABC34"])
    amount: str = Field(..., max_length=50, description="Amount paid as entered by the user", examples=["10 USD"])
    note: str | None = Field(None, max_length=500, description="Optional note for the reviewer")


class ActivationRequestItem(BaseModel):
    id: str
    user_id: str
    plan_requested: Plan
    method: str
    reference: str
    amount: str
    note: str | None = None
    status: RequestStatus
    created_at: datetime
    reviewed_at: datetime | None = None
    reviewed_by: str | None = None
    profile: ProfileResponse | None = Field(None, description="Owner profile (admin listings only)")

    @classmethod
    def from_entity(
        cls, entity: ActivationRequestEntity, profile: ProfileResponse | None = None
    ) -> ActivationRequestItem:
        return cls(
            id=entity.id,
            user_id=entity.user_id,
            plan_requested=entity.plan_requested,
            method=entity.method,
            reference=entity.reference,
            amount=entity.amount,
            note=entity.note,
            status=entity.status,
            created_at=entity.created_at,
            reviewed_at=entity.reviewed_at,
            reviewed_by=entity.reviewed_by,
            profile=profile,
        )


class ListActivationRequestsResponse(BaseModel):
    requests: list[ActivationRequestItem]


class ResolveRequestBody(BaseModel):
    decision: Literal["approved", "rejected"] = Field(..., description="Review outcome")


class ResolveRequestResponse(BaseModel):
    request: ActivationRequestItem
    profile: ProfileResponse | None = Field(None, description="Activated profile when approved")
