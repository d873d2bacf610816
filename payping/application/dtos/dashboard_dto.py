from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from payping.application.dtos.reminder_dto import ReminderItem
from payping.application.use_cases.get_dashboard import DashboardSummary


class DashboardResponse(BaseModel):
    """Pending-reminder counts and short previews for the home screen."""
    now: datetime
    due_today: int = Field(..., ge=0)
    due_this_week: int = Field(..., ge=0)
    overdue: int = Field(..., ge=0)
    total_clients: int = Field(..., ge=0)
    today: list[ReminderItem] = Field(..., description="First reminders due today")
    overdue_items: list[ReminderItem] = Field(..., description="First overdue reminders")

    @classmethod
    def from_summary(cls, summary: DashboardSummary) -> DashboardResponse:
        return cls(
            now=summary.now,
            due_today=summary.due_today_count,
            due_this_week=summary.due_this_week_count,
            overdue=summary.overdue_count,
            total_clients=summary.total_clients,
            today=[ReminderItem.from_view(item) for item in summary.due_today],
            overdue_items=[ReminderItem.from_view(item) for item in summary.overdue],
        )
