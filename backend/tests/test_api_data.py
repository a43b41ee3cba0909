from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import select

from overtime_sync.db.session import get_session
from overtime_sync.models.kv import KVEntry


def _expire_all_tokens() -> None:
    async def scenario() -> None:
        async with get_session() as session:
            past = datetime.now(timezone.utc) - timedelta(seconds=1)
            result = await session.execute(select(KVEntry).where(KVEntry.key.startswith("token:")))
            for entry in result.scalars():
                entry.expires_at = past
            await session.commit()

    asyncio.run(scenario())


def test_fetch_without_stored_data_returns_empty_mapping(client: TestClient, auth_headers) -> None:
    response = client.get("/api/data", headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == {"data": {}}


def test_save_then_fetch_returns_identical_structure(client: TestClient, auth_headers) -> None:
    dataset = {"2024-3": {"5": "full", "6": "half"}}

    saved = client.post("/api/data", json=dataset, headers=auth_headers)
    assert saved.status_code == 200
    assert saved.json() == {"message": "数据保存成功"}

    fetched = client.get("/api/data", headers=auth_headers)
    assert fetched.json() == {"data": dataset}


def test_save_overwrites_previous_dataset(client: TestClient, auth_headers) -> None:
    client.post("/api/data", json={"2024-1": {"2": "full"}}, headers=auth_headers)
    client.post("/api/data", json={"2024-2": {"5": "half"}}, headers=auth_headers)

    assert client.get("/api/data", headers=auth_headers).json() == {"data": {"2024-2": {"5": "half"}}}


def test_datasets_are_per_user(client: TestClient, auth_headers) -> None:
    client.post("/api/data", json={"2024-1": {"2": "full"}}, headers=auth_headers)
    client.post("/api/register", json={"username": "bobby", "password": "secret2"})
    token = client.post("/api/login", json={"username": "bobby", "password": "secret2"}).json()["token"]

    response = client.get("/api/data", headers={"Authorization": f"Bearer {token}"})

    assert response.json() == {"data": {}}


def test_save_rejects_malformed_payload(client: TestClient, auth_headers) -> None:
    malformed = [[1, 2], "text", {"2024-3": {"5": "weekend"}}, {"2024-2": {"30": "full"}}, {"2024-3": {"05": "half"}}]
    for payload in malformed:
        response = client.post("/api/data", json=payload, headers=auth_headers)
        assert response.status_code == 400
        assert response.json() == {"error": "数据格式无效"}

    broken = client.post(
        "/api/data", content=b"{oops", headers={**auth_headers, "Content-Type": "application/json"}
    )
    assert broken.status_code == 400
    assert client.get("/api/data", headers=auth_headers).json() == {"data": {}}


def test_data_requires_token(client: TestClient) -> None:
    assert client.get("/api/data").status_code == 401
    assert client.get("/api/data", headers={"Authorization": "Token abc"}).status_code == 401
    response = client.post("/api/data", json={})
    assert response.status_code == 401
    assert response.json() == {"error": "未授权访问"}


def test_unknown_token_is_rejected_without_data(client: TestClient, auth_headers) -> None:
    client.post("/api/data", json={"2024-3": {"5": "full"}}, headers=auth_headers)

    response = client.get("/api/data", headers={"Authorization": "Bearer not-a-real-token"})

    assert response.status_code == 401
    assert response.json() == {"error": "令牌无效或已过期"}


def test_expired_token_is_rejected(client: TestClient, auth_headers) -> None:
    client.post("/api/data", json={"2024-3": {"5": "full"}}, headers=auth_headers)
    _expire_all_tokens()

    response = client.get("/api/data", headers=auth_headers)

    assert response.status_code == 401
    assert "data" not in response.json()


@pytest.mark.parametrize(
    ("target", "method", "message"),
    [
        ("fetch_dataset", "GET", "获取数据失败"),
        ("save_dataset", "POST", "保存数据失败"),
    ],
)
def test_unexpected_failures_are_hidden(
    client: TestClient, auth_headers, monkeypatch: pytest.MonkeyPatch, target: str, method: str, message: str
) -> None:
    async def broken(*args, **kwargs) -> None:
        raise RuntimeError("db exploded")

    monkeypatch.setattr(f"overtime_sync.services.data.{target}", broken)

    if method == "GET":
        response = client.get("/api/data", headers=auth_headers)
    else:
        response = client.post("/api/data", json={"2024-3": {"5": "full"}}, headers=auth_headers)

    assert response.status_code == 500
    assert response.json() == {"error": message}
    assert "Traceback" not in response.text
    assert "db exploded" not in response.text
