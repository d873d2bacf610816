from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from payping.application.dtos.client_dto import (
    ClientItem,
    CreateClientBody,
    DeleteClientResponse,
    ListClientsResponse,
    UpdateClientBody,
)
from payping.application.use_cases.manage_clients import (
    CreateClientUseCase,
    DeleteClientUseCase,
    GetClientUseCase,
    ListClientsUseCase,
    UpdateClientUseCase,
)
from payping.domain.entities.actor import ActorContext
from payping.infrastructure.api.dependencies import get_client_repo, require_entitled_actor
from payping.infrastructure.database.repositories.client_repository import ClientRepository

router = APIRouter(
    prefix="/clients",
    tags=["Clients"],
    responses={
        401: {"description": "Unauthorized - Invalid or missing authentication token"},
        403: {"description": "Forbidden - Account not activated or client owned by another user"},
        404: {"description": "Not Found - Client does not exist"},
        422: {"description": "Validation Error - Invalid request format"},
    },
)


@router.get(
    "",
    response_model=ListClientsResponse,
    summary="List Clients",
    description="Own clients, newest first. `search` matches name or contact, case-insensitively.",
)
def list_clients(
    actor: ActorContext = Depends(require_entitled_actor),
    clients: ClientRepository = Depends(get_client_repo),
    search: str | None = Query(None, max_length=100, description="Filter by name or contact"),
):
    items = ListClientsUseCase(clients).execute(actor, search=search)
    return ListClientsResponse(clients=[ClientItem.from_entity(c) for c in items], total=len(items))


@router.post("", response_model=ClientItem, status_code=status.HTTP_201_CREATED, summary="Create Client")
def create_client(
    body: CreateClientBody,
    actor: ActorContext = Depends(require_entitled_actor),
    clients: ClientRepository = Depends(get_client_repo),
):
    entity = CreateClientUseCase(clients).execute(actor, body.name, body.contact, body.notes)
    return ClientItem.from_entity(entity)


@router.get("/{client_id}", response_model=ClientItem, summary="Get Client")
def get_client(
    client_id: str,
    actor: ActorContext = Depends(require_entitled_actor),
    clients: ClientRepository = Depends(get_client_repo),
):
    return ClientItem.from_entity(GetClientUseCase(clients).execute(actor, client_id))


@router.patch("/{client_id}", response_model=ClientItem, summary="Update Client")
def update_client(
    client_id: str,
    body: UpdateClientBody,
    actor: ActorContext = Depends(require_entitled_actor),
    clients: ClientRepository = Depends(get_client_repo),
):
    entity = UpdateClientUseCase(clients).execute(actor, client_id, body.model_dump(exclude_unset=True))
    return ClientItem.from_entity(entity)


@router.delete(
    "/{client_id}",
    response_model=DeleteClientResponse,
    summary="Delete Client",
    description="Delete a client together with all of its reminders.",
)
def delete_client(
    client_id: str,
    actor: ActorContext = Depends(require_entitled_actor),
    clients: ClientRepository = Depends(get_client_repo),
):
    ok = DeleteClientUseCase(clients).execute(actor, client_id)
    return DeleteClientResponse(ok=ok)
