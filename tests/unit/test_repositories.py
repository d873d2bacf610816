import uuid
from datetime import datetime, timezone
from unittest import mock

import pytest

from payping.domain.errors import ConflictError
from payping.infrastructure.database.repositories.activation_request_repository import (
    ActivationRequestRepository,
)
from payping.infrastructure.database.repositories.client_repository import ClientRepository
from payping.infrastructure.database.repositories.reminder_repository import ReminderRepository


def postgres_backed(repo_cls):
    repo = repo_cls(None)
    repo.use_local_db = True
    repo.pg_client = mock.Mock()
    return repo


@pytest.mark.parametrize("repo_cls", [ReminderRepository, ClientRepository, ActivationRequestRepository])
def test_malformed_id_is_missing_without_querying(repo_cls):
    repo = postgres_backed(repo_cls)
    assert repo.get("abc") is None
    assert repo.get("rem_0123456789ab") is None
    repo.pg_client.fetch_one.assert_not_called()


def test_uuid_id_is_queried():
    repo = postgres_backed(ReminderRepository)
    repo.pg_client.fetch_one.return_value = None
    assert repo.get(str(uuid.uuid4())) is None
    repo.pg_client.fetch_one.assert_called_once()


def test_memory_ids_are_accepted_in_memory_mode():
    assert ReminderRepository(None).is_malformed_id("rem_0123456789ab") is False


def test_complete_on_postgres_conflicts_when_no_pending_row():
    repo = postgres_backed(ReminderRepository)
    repo.pg_client.fetch_one.return_value = None
    with pytest.raises(ConflictError):
        repo.complete(str(uuid.uuid4()), datetime(2024, 1, 15, tzinfo=timezone.utc))
    query = repo.pg_client.fetch_one.call_args.args[0]
    assert "status = %s" in query.split("WHERE")[1]


def test_missing_reminder_over_http_is_not_found(client, admin_header):
    client.post("/admin/demo", headers=admin_header)
    assert client.get("/reminders/abc", headers=admin_header).status_code == 404
