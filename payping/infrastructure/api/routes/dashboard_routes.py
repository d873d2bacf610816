from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from payping.application.dtos.dashboard_dto import DashboardResponse
from payping.application.use_cases.get_dashboard import GetDashboardUseCase
from payping.domain.entities.actor import ActorContext
from payping.infrastructure.api.dependencies import (
    get_client_repo,
    get_reminder_repo,
    require_entitled_actor,
)
from payping.infrastructure.database.repositories.client_repository import ClientRepository
from payping.infrastructure.database.repositories.reminder_repository import ReminderRepository

router = APIRouter(
    prefix="/dashboard",
    tags=["Dashboard"],
    responses={
        401: {"description": "Unauthorized - Invalid or missing authentication token"},
        403: {"description": "Forbidden - Account not activated"},
    },
)


@router.get(
    "",
    response_model=DashboardResponse,
    summary="Dashboard Summary",
    description="""
    Counts of pending reminders due today, due later this week and overdue,
    plus the total number of clients and short previews of the today and
    overdue lists.
    """,
)
def get_dashboard(
    actor: ActorContext = Depends(require_entitled_actor),
    reminders: ReminderRepository = Depends(get_reminder_repo),
    clients: ClientRepository = Depends(get_client_repo),
    tz: str | None = Query(None, description="IANA timezone used for bucketing"),
):
    summary = GetDashboardUseCase(reminders, clients).execute(actor, tz=tz)
    return DashboardResponse.from_summary(summary)
