from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from payping.domain.entities.plan import Plan, PlanInfo
from payping.domain.entities.profile import ProfileEntity


class ProfileResponse(BaseModel):
    """A user's profile and entitlement state."""
    id: str = Field(..., description="Unique identifier of the user")
    email: str | None = Field(None, description="Email address of the user", examples=["user@example.com"])
    is_active: bool = Field(..., description="Whether the user may use the client and reminder features")
    plan: Plan | None = Field(None, description="Current plan, if any")
    activated_at: datetime | None = Field(None, description="Timestamp of the most recent activation")
    created_at: datetime | None = Field(None, description="Timestamp when the profile was created")
    is_admin: bool | None = Field(None, description="Present on the caller's own profile only")

    @classmethod
    def from_entity(cls, entity: ProfileEntity, is_admin: bool | None = None) -> ProfileResponse:
        return cls(
            id=entity.id,
            email=entity.email,
            is_active=entity.is_active,
            plan=entity.plan,
            activated_at=entity.activated_at,
            created_at=entity.created_at,
            is_admin=is_admin,
        )


class ValidateTokenResponse(BaseModel):
    """Response model for token validation."""
    user_id: str = Field(..., description="Unique identifier of the authenticated user")
    email: str | None = Field(None, description="Email address of the authenticated user")
    is_active: bool = Field(..., description="Whether the account is activated")


class ListProfilesResponse(BaseModel):
    profiles: list[ProfileResponse] = Field(..., description="All profiles, newest first")


class SetActiveBody(BaseModel):
    is_active: bool = Field(..., description="New activation state")


class SetPlanBody(BaseModel):
    plan: Plan | None = Field(..., description="New plan, or null to clear it")


class PaymentMethodItem(BaseModel):
    name: str = Field(..., examples=["PayPal"])
    instruction: str = Field(..., examples=["Send to: payments@payping.app"])


class PlanItem(BaseModel):
    id: Plan
    name: str
    price: int = Field(..., ge=0)
    currency: str = Field(..., examples=["USD"])
    description: str
    payment_methods: list[PaymentMethodItem]

    @classmethod
    def from_info(cls, info: PlanInfo) -> PlanItem:
        return cls(
            id=info.id,
            name=info.name,
            price=info.price,
            currency=info.currency,
            description=info.description,
            payment_methods=[
                PaymentMethodItem(name=m.name, instruction=m.instruction) for m in info.payment_methods
            ],
        )


class ListPlansResponse(BaseModel):
    plans: list[PlanItem]
