from __future__ import annotations

from fastapi import APIRouter

from payping.application.dtos.profile_dto import ListPlansResponse, PlanItem
from payping.domain.entities.plan import PLANS

router = APIRouter(prefix="/plans", tags=["Plans"])


@router.get(
    "",
    response_model=ListPlansResponse,
    summary="List Plans",
    description="Pricing and manual payment instructions for every plan. No authentication required.",
)
def list_plans():
    return ListPlansResponse(plans=[PlanItem.from_info(info) for info in PLANS.values()])
