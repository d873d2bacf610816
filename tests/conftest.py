import os

import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("SUPABASE_DISABLED", "1")
os.environ.setdefault("ADMIN_USER_IDS", "fake-admin-token")
os.environ.setdefault("APP_TIMEZONE", "UTC")

from payping.core.config import get_settings  # noqa: E402

get_settings.cache_clear()


@pytest.fixture(scope="session")
def client() -> TestClient:
    # lazy import after env configured
    from payping.main import create_app

    app = create_app()
    return TestClient(app)


@pytest.fixture(autouse=True)
def clean_store():
    from payping.infrastructure.database.memory_store import get_memory_store

    store = get_memory_store()
    store.reset()
    yield store
    store.reset()


@pytest.fixture()
def auth_header() -> dict[str, str]:
    # any token is accepted in disabled mode; this one maps to user "fake-test-token"
    return {"Authorization": "Bearer test-token"}


@pytest.fixture()
def admin_header() -> dict[str, str]:
    # "fake-admin-token" is listed in ADMIN_USER_IDS
    return {"Authorization": "Bearer admin-token"}
