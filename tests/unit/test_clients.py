import pytest

from payping.application.use_cases.manage_clients import (
    CreateClientUseCase,
    GetClientUseCase,
    ListClientsUseCase,
    UpdateClientUseCase,
)
from payping.domain.entities.actor import ActorContext
from payping.domain.errors import AuthorizationError, NotFoundError, ValidationError
from payping.infrastructure.database.repositories.client_repository import ClientRepository

OWNER = ActorContext(user_id="owner")
OTHER = ActorContext(user_id="other")


@pytest.fixture()
def clients():
    return ClientRepository(None)


def test_create_trims_and_detects_contact_type(clients):
    c = CreateClientUseCase(clients).execute(OWNER, "  John Smith ", "john@example.com", "  ")
    assert c.name == "John Smith"
    assert c.notes is None
    assert c.contact_type == "email"
    phone = CreateClientUseCase(clients).execute(OWNER, "Sarah", "+1234567890")
    assert phone.contact_type == "phone"


def test_create_validates_fields(clients):
    with pytest.raises(ValidationError):
        CreateClientUseCase(clients).execute(OWNER, "", "+1")
    with pytest.raises(ValidationError):
        CreateClientUseCase(clients).execute(OWNER, "x" * 101, "+1")
    with pytest.raises(ValidationError):
        CreateClientUseCase(clients).execute(OWNER, "Ok", "+1", "n" * 501)


def test_update_and_ownership(clients):
    c = CreateClientUseCase(clients).execute(OWNER, "John Smith", "john@example.com")
    updated = UpdateClientUseCase(clients).execute(OWNER, c.id, {"notes": "VIP"})
    assert updated.notes == "VIP" and updated.name == "John Smith"

    with pytest.raises(AuthorizationError):
        UpdateClientUseCase(clients).execute(OTHER, c.id, {"name": "Mine now"})
    with pytest.raises(AuthorizationError):
        GetClientUseCase(clients).execute(OTHER, c.id)
    with pytest.raises(NotFoundError):
        GetClientUseCase(clients).execute(OWNER, "cli_missing")


def test_list_is_per_user_with_search(clients):
    CreateClientUseCase(clients).execute(OWNER, "John Smith", "john@example.com")
    CreateClientUseCase(clients).execute(OWNER, "Sarah Johnson", "+1234567890")
    CreateClientUseCase(clients).execute(OTHER, "Johnny Other", "+19999")

    assert len(ListClientsUseCase(clients).execute(OWNER)) == 2
    names = {c.name for c in ListClientsUseCase(clients).execute(OWNER, search="JOHN")}
    assert names == {"John Smith", "Sarah Johnson"}
    assert [c.name for c in ListClientsUseCase(clients).execute(OWNER, search="+1234")] == ["Sarah Johnson"]
