from __future__ import annotations

import asyncio
import os
import tempfile
from pathlib import Path

import pytest

_DB_DIR = Path(tempfile.mkdtemp(prefix="overtime-tests-"))
DB_PATH = _DB_DIR / "test.db"

os.environ["OVERTIME_DATABASE_URL"] = f"sqlite+aiosqlite:///{DB_PATH}"
os.environ["OVERTIME_SCHEDULER_ENABLED"] = "false"

from fastapi.testclient import TestClient  # noqa: E402

from overtime_sync.db.session import init_models  # noqa: E402
from overtime_sync.main import app  # noqa: E402


def _remove_database() -> None:
    if DB_PATH.exists():
        DB_PATH.unlink()


@pytest.fixture(autouse=True)
def reset_database() -> None:
    _remove_database()
    asyncio.run(init_models())
    yield
    _remove_database()


@pytest.fixture
def client() -> TestClient:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(client: TestClient) -> dict[str, str]:
    client.post("/api/register", json={"username": "alice", "password": "secret1"})
    login = client.post("/api/login", json={"username": "alice", "password": "secret1"})
    return {"Authorization": f"Bearer {login.json()['token']}"}
