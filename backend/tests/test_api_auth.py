from __future__ import annotations

import pytest
from fastapi.testclient import TestClient


def test_register_then_login_returns_token(client: TestClient) -> None:
    register = client.post("/api/register", json={"username": "alice", "password": "secret1"})
    assert register.status_code == 200
    assert register.json() == {"message": "注册成功"}
    assert register.headers["content-type"].startswith("application/json")

    login = client.post("/api/login", json={"username": "alice", "password": "secret1"})
    assert login.status_code == 200
    body = login.json()
    assert body["username"] == "alice"
    assert body["message"] == "登录成功"
    assert len(body["token"]) >= 32


def test_each_login_mints_a_new_token(client: TestClient) -> None:
    client.post("/api/register", json={"username": "alice", "password": "secret1"})
    first = client.post("/api/login", json={"username": "alice", "password": "secret1"}).json()["token"]
    second = client.post("/api/login", json={"username": "alice", "password": "secret1"}).json()["token"]

    assert first != second
    for token in (first, second):
        response = client.get("/api/data", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 200


def test_register_twice_conflicts(client: TestClient) -> None:
    client.post("/api/register", json={"username": "alice", "password": "secret1"})
    again = client.post("/api/register", json={"username": "alice", "password": "other-secret"})

    assert again.status_code == 409
    assert again.json() == {"error": "用户名已存在"}


@pytest.mark.parametrize(
    ("payload", "message"),
    [
        ({"username": "ab", "password": "secret1"}, "用户名长度应为3-20个字符"),
        ({"username": "a" * 21, "password": "secret1"}, "用户名长度应为3-20个字符"),
        ({"username": "alice", "password": "12345"}, "密码长度至少为6位"),
        ({"username": "", "password": "secret1"}, "用户名和密码不能为空"),
        ({"username": "alice"}, "用户名和密码不能为空"),
        ({"username": 123, "password": "secret1"}, "用户名和密码不能为空"),
    ],
)
def test_register_validation(client: TestClient, payload: dict, message: str) -> None:
    response = client.post("/api/register", json=payload)

    assert response.status_code == 400
    assert response.json() == {"error": message}


def test_register_accepts_boundary_lengths(client: TestClient) -> None:
    assert client.post("/api/register", json={"username": "abc", "password": "123456"}).status_code == 200
    assert client.post("/api/register", json={"username": "a" * 20, "password": "123456"}).status_code == 200


def test_register_rejects_malformed_json(client: TestClient) -> None:
    response = client.post(
        "/api/register", content=b"{not json", headers={"Content-Type": "application/json"}
    )

    assert response.status_code == 400


def test_login_unknown_user(client: TestClient) -> None:
    response = client.post("/api/login", json={"username": "nobody", "password": "secret1"})

    assert response.status_code == 404
    assert response.json() == {"error": "用户不存在"}


def test_login_wrong_password(client: TestClient) -> None:
    client.post("/api/register", json={"username": "alice", "password": "secret1"})
    response = client.post("/api/login", json={"username": "alice", "password": "wrong-one"})

    assert response.status_code == 401
    assert response.json() == {"error": "密码错误"}


def test_login_requires_both_fields(client: TestClient) -> None:
    response = client.post("/api/login", json={"username": "alice", "password": ""})

    assert response.status_code == 400
    assert response.json() == {"error": "用户名和密码不能为空"}


def test_cors_headers_are_open(client: TestClient) -> None:
    response = client.post(
        "/api/register",
        json={"username": "alice", "password": "secret1"},
        headers={"Origin": "https://calendar.example"},
    )

    assert response.headers["access-control-allow-origin"] == "*"


def test_cors_preflight(client: TestClient) -> None:
    response = client.options(
        "/api/data",
        headers={
            "Origin": "https://calendar.example",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "Authorization, Content-Type",
        },
    )

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"
    assert "POST" in response.headers["access-control-allow-methods"]


def test_bare_options_request_is_answered(client: TestClient) -> None:
    response = client.options("/api/anything")

    assert response.status_code == 200
    assert response.content == b""


def test_unknown_route_returns_json_404(client: TestClient) -> None:
    response = client.get("/api/unknown")

    assert response.status_code == 404
    assert response.json() == {"error": "Not found"}


def test_register_unexpected_failure_is_hidden(client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
    async def broken_register(*args, **kwargs) -> None:
        raise RuntimeError("db exploded")

    monkeypatch.setattr("overtime_sync.api.routes.auth.register_user", broken_register)

    response = client.post("/api/register", json={"username": "alice", "password": "secret1"})

    assert response.status_code == 500
    assert response.json() == {"error": "注册失败"}
    assert "Traceback" not in response.text
    assert "db exploded" not in response.text
