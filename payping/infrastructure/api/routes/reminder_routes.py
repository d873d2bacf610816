from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from payping.application.dtos.reminder_dto import (
    CreateReminderBody,
    DeleteReminderResponse,
    ListRemindersResponse,
    ReminderItem,
    ReminderMessageResponse,
    UpdateReminderBody,
)
from payping.application.use_cases.create_reminder import CreateReminderUseCase
from payping.application.use_cases.delete_reminder import DeleteReminderUseCase
from payping.application.use_cases.edit_reminder import EditReminderUseCase
from payping.application.use_cases.list_reminders import GetReminderUseCase, ListRemindersUseCase
from payping.application.use_cases.mark_reminder_done import MarkReminderDoneUseCase
from payping.domain.entities.actor import ActorContext
from payping.domain.services.bucketing_service import ReminderView
from payping.infrastructure.api.dependencies import (
    get_client_repo,
    get_reminder_repo,
    require_entitled_actor,
)
from payping.infrastructure.database.repositories.client_repository import ClientRepository
from payping.infrastructure.database.repositories.reminder_repository import ReminderRepository

router = APIRouter(
    prefix="/reminders",
    tags=["Reminders"],
    responses={
        401: {"description": "Unauthorized - Invalid or missing authentication token"},
        403: {"description": "Forbidden - Account not activated or reminder owned by another user"},
        404: {"description": "Not Found - Reminder or client does not exist"},
        422: {"description": "Validation Error - Invalid request format"},
    },
)

_TZ_QUERY = Query(None, description="IANA timezone used for bucketing, e.g. Africa/Nairobi")


@router.get(
    "",
    response_model=ListRemindersResponse,
    summary="List Reminders",
    description="""
    Own reminders ordered by `remind_at`, filtered by tab.

    **Views:**
    - `all`: everything
    - `today`: pending, due today
    - `week`: pending, after today up to the end of the week
    - `overdue`: pending, before the start of today
    - `done`: completed

    `search` matches client name or message text, case-insensitively.
    """,
)
def list_reminders(
    actor: ActorContext = Depends(require_entitled_actor),
    reminders: ReminderRepository = Depends(get_reminder_repo),
    clients: ClientRepository = Depends(get_client_repo),
    view: ReminderView = Query(ReminderView.ALL, description="List tab"),
    search: str | None = Query(None, max_length=100),
    tz: str | None = _TZ_QUERY,
):
    items = ListRemindersUseCase(reminders, clients).execute(actor, view=view, search=search, tz=tz)
    return ListRemindersResponse(reminders=[ReminderItem.from_view(i) for i in items], total=len(items))


@router.post(
    "",
    response_model=ReminderItem,
    status_code=status.HTTP_201_CREATED,
    summary="Create Reminder",
    description="""
    Schedule a follow-up or payment reminder for one of your clients.

    - `remind_at` may be in the past
    - When `message` is omitted it is generated from the template for `kind` and `channel`
    """,
)
def create_reminder(
    body: CreateReminderBody,
    actor: ActorContext = Depends(require_entitled_actor),
    reminders: ReminderRepository = Depends(get_reminder_repo),
    clients: ClientRepository = Depends(get_client_repo),
):
    entity = CreateReminderUseCase(reminders, clients).execute(
        actor,
        client_id=body.client_id,
        remind_at=body.remind_at,
        kind=body.kind,
        channel=body.channel,
        message=body.message,
    )
    return ReminderItem.from_view(GetReminderUseCase(reminders, clients).execute(actor, entity.id))


@router.get("/{reminder_id}", response_model=ReminderItem, summary="Get Reminder")
def get_reminder(
    reminder_id: str,
    actor: ActorContext = Depends(require_entitled_actor),
    reminders: ReminderRepository = Depends(get_reminder_repo),
    clients: ClientRepository = Depends(get_client_repo),
    tz: str | None = _TZ_QUERY,
):
    return ReminderItem.from_view(GetReminderUseCase(reminders, clients).execute(actor, reminder_id, tz=tz))


@router.patch(
    "/{reminder_id}",
    response_model=ReminderItem,
    summary="Edit Reminder",
    description="Change client, time, kind, channel or message. Done reminders stay done.",
)
def edit_reminder(
    reminder_id: str,
    body: UpdateReminderBody,
    actor: ActorContext = Depends(require_entitled_actor),
    reminders: ReminderRepository = Depends(get_reminder_repo),
    clients: ClientRepository = Depends(get_client_repo),
):
    EditReminderUseCase(reminders, clients).execute(actor, reminder_id, body.model_dump(exclude_unset=True))
    return ReminderItem.from_view(GetReminderUseCase(reminders, clients).execute(actor, reminder_id))


@router.post(
    "/{reminder_id}/done",
    response_model=ReminderItem,
    summary="Mark Reminder Done",
    responses={409: {"description": "Conflict - Reminder already done"}},
)
def mark_done(
    reminder_id: str,
    actor: ActorContext = Depends(require_entitled_actor),
    reminders: ReminderRepository = Depends(get_reminder_repo),
    clients: ClientRepository = Depends(get_client_repo),
):
    MarkReminderDoneUseCase(reminders).execute(actor, reminder_id)
    return ReminderItem.from_view(GetReminderUseCase(reminders, clients).execute(actor, reminder_id))


@router.get(
    "/{reminder_id}/message",
    response_model=ReminderMessageResponse,
    summary="Get Message to Send",
    description="The reminder text and the client contact, ready to copy into WhatsApp or email.",
)
def get_message(
    reminder_id: str,
    actor: ActorContext = Depends(require_entitled_actor),
    reminders: ReminderRepository = Depends(get_reminder_repo),
    clients: ClientRepository = Depends(get_client_repo),
):
    item = GetReminderUseCase(reminders, clients).execute(actor, reminder_id)
    return ReminderMessageResponse(
        channel=item.reminder.channel,
        contact=item.client.contact if item.client else "",
        message=item.reminder.message,
    )


@router.delete("/{reminder_id}", response_model=DeleteReminderResponse, summary="Delete Reminder")
def delete_reminder(
    reminder_id: str,
    actor: ActorContext = Depends(require_entitled_actor),
    reminders: ReminderRepository = Depends(get_reminder_repo),
):
    return DeleteReminderResponse(ok=DeleteReminderUseCase(reminders).execute(actor, reminder_id))
