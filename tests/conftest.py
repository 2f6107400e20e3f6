# tests/conftest.py

from __future__ import annotations

from typing import Callable, Iterator

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from config import Settings
from database import create_db_and_tables, create_db_engine
from main import create_app
from models import User
from services.session_issuer import SessionIssuer

TEST_SECRET = "test-secret-key-with-enough-length-for-hs256"
PASSWORD = "hunter22"


@pytest.fixture()
def settings() -> Settings:
    """
    Settings built directly instead of from the environment.

    In-memory SQLite gives every test its own empty database; low bcrypt
    cost keeps hashing fast.
    """
    return Settings(
        jwt_secret_key=TEST_SECRET,
        database_url="sqlite://",
        environment="development",
        bcrypt_rounds=4,
    )


@pytest.fixture()
def session(settings: Settings) -> Iterator[Session]:
    engine = create_db_engine(settings)
    create_db_and_tables(engine)
    with Session(engine) as session:
        yield session
    engine.dispose()


@pytest.fixture()
def issuer(settings: Settings) -> SessionIssuer:
    return SessionIssuer(settings)


@pytest.fixture()
def user(session: Session, issuer: SessionIssuer) -> User:
    return issuer.signup(session, "alice@example.com", PASSWORD)


@pytest.fixture()
def client(settings: Settings) -> Iterator[TestClient]:
    app = create_app(settings)
    with TestClient(app) as client:
        yield client


@pytest.fixture()
def login(client: TestClient) -> Callable[[str], TestClient]:
    """Sign up and log in a user on the shared client; the cookie stays in its jar."""

    def _login(email: str = "alice@example.com", password: str = PASSWORD) -> TestClient:
        resp = client.post("/api/signup", json={"email": email, "password": password})
        assert resp.status_code == 201, resp.text
        resp = client.post("/api/login", json={"email": email, "password": password})
        assert resp.status_code == 200, resp.text
        return client

    return _login
