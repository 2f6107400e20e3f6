# tests/test_auth_routes.py

from __future__ import annotations

import asyncio
from dataclasses import replace

import httpx
import jwt
import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from config import Settings
from database import create_db_and_tables
from main import create_app

from conftest import PASSWORD, TEST_SECRET


def _signup(client: TestClient, email: str = "alice@example.com", password: str = PASSWORD):
    return client.post("/api/signup", json={"email": email, "password": password})


def test_signup_then_login_sets_cookie(client: TestClient) -> None:
    assert _signup(client).status_code == 201

    resp = client.post("/api/login", json={"email": "alice@example.com", "password": PASSWORD})

    assert resp.status_code == 200
    assert resp.json() == {"message": "Login successful"}
    cookie = resp.headers["set-cookie"]
    assert cookie.startswith("token=")
    assert "HttpOnly" in cookie
    assert "Max-Age=3600" in cookie
    assert "Path=/" in cookie

    payload = jwt.decode(client.cookies["token"], TEST_SECRET, algorithms=["HS256"])
    assert payload["email"] == "alice@example.com"


def test_login_email_is_case_insensitive(client: TestClient) -> None:
    _signup(client, email="Alice@Example.com")
    resp = client.post("/api/login", json={"email": "alice@example.com", "password": PASSWORD})
    assert resp.status_code == 200


def test_signup_twice_conflicts(client: TestClient) -> None:
    _signup(client)
    resp = _signup(client)
    assert resp.status_code == 409


def test_bad_credentials_share_status_and_message(client: TestClient) -> None:
    _signup(client)

    unknown = client.post("/api/login", json={"email": "nobody@example.com", "password": PASSWORD})
    wrong = client.post("/api/login", json={"email": "alice@example.com", "password": "wrong-pass"})

    assert unknown.status_code == wrong.status_code == 401
    assert unknown.json() == wrong.json() == {"detail": "Invalid email or password"}
    assert "set-cookie" not in unknown.headers


def test_login_validation_errors(client: TestClient) -> None:
    bad_email = client.post("/api/login", json={"email": "not-an-email", "password": PASSWORD})
    assert bad_email.status_code == 400
    assert bad_email.json() == {"detail": "Email must be a valid email address."}

    short = client.post("/api/login", json={"email": "alice@example.com", "password": "12345"})
    assert short.status_code == 400
    assert short.json() == {"detail": "Password must be at least 6 characters long."}

    missing = client.post("/api/login", json={"password": PASSWORD})
    assert missing.status_code == 400
    assert missing.json() == {"detail": "Email is required."}

    too_long = client.post("/api/login", json={"email": "alice@example.com", "password": "x" * 73})
    assert too_long.status_code == 400
    assert too_long.json() == {"detail": "Password must be at most 72 bytes long."}


def test_wrong_method_is_405(client: TestClient) -> None:
    assert client.get("/api/login").status_code == 405
    assert client.get("/api/logout").status_code == 405


def test_logout_clears_cookie_and_revokes_token(login) -> None:
    client = login()
    token = client.cookies["token"]
    assert client.get("/api/tasks").status_code == 200

    resp = client.post("/api/logout")

    assert resp.status_code == 200
    assert resp.json() == {"message": "Logout successful"}
    assert "Max-Age=0" in resp.headers["set-cookie"]
    assert "no-store" in resp.headers["cache-control"]

    client.cookies.clear()
    reused = client.get("/api/tasks", headers={"Authorization": f"Bearer {token}"})
    assert reused.status_code == 401


def test_logout_without_session_succeeds(client: TestClient) -> None:
    resp = client.post("/api/logout")
    assert resp.status_code == 200


def test_production_cookie_policy_is_consistent(settings: Settings) -> None:
    app = create_app(replace(settings, environment="production"))
    with TestClient(app, base_url="https://testserver") as client:
        _signup(client)
        login = client.post("/api/login", json={"email": "alice@example.com", "password": PASSWORD})
        logout = client.post("/api/logout")

    for resp in (login, logout):
        cookie = resp.headers["set-cookie"]
        assert "Secure" in cookie
        assert "samesite=none" in cookie.lower()
        assert "HttpOnly" in cookie


def test_development_cookie_is_not_secure(client: TestClient) -> None:
    _signup(client)
    login = client.post("/api/login", json={"email": "alice@example.com", "password": PASSWORD})
    logout = client.post("/api/logout")

    for resp in (login, logout):
        cookie = resp.headers["set-cookie"]
        assert "Secure" not in cookie
        assert "samesite=lax" in cookie.lower()


@pytest.fixture()
def anyio_backend() -> str:
    return "asyncio"


@pytest.mark.anyio
async def test_password_hashing_does_not_block_other_requests(settings: Settings) -> None:
    app = create_app(replace(settings, bcrypt_rounds=13))
    create_db_and_tables(app.state.engine)
    with Session(app.state.engine) as session:
        app.state.session_issuer.signup(session, "alice@example.com", PASSWORD)

    finished = []
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:

        async def login():
            resp = await client.post("/api/login", json={"email": "alice@example.com", "password": PASSWORD})
            finished.append("login")
            return resp

        async def health():
            await asyncio.sleep(0.05)
            resp = await client.get("/health")
            finished.append("health")
            return resp

        login_resp, health_resp = await asyncio.gather(login(), health())

    assert login_resp.status_code == 200
    assert health_resp.status_code == 200
    assert finished == ["health", "login"]
