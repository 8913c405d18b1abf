import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import NullPool

from app import create_app
from core.get_db import build_engine
from core.settings import settings


def build_client(database_url: str) -> TestClient:
    engine = build_engine(database_url, poolclass=NullPool)
    return TestClient(create_app(settings, engine=engine))


@pytest.fixture
def client_for():
    return build_client


@pytest.fixture
def client(tmp_path):
    with build_client(f"sqlite+aiosqlite:///{tmp_path / 'listings.db'}") as test_client:
        yield test_client


@pytest.fixture
def make_user(client):
    def _make_user(username: str, password: str = "secret123", **extra):
        payload = {
            "username": username,
            "email": f"{username}@mail.com",
            "password": password,
            **extra,
        }
        res = client.post("/api/auth/register", json=payload)
        assert res.status_code == 201, res.text

        res = client.post(
            "/api/auth/login", json={"username": username, "password": password}
        )
        assert res.status_code == 200, res.text
        # Login sets a cookie; tests authenticate explicitly through headers.
        client.cookies.clear()

        body = res.json()
        return {
            "id": body["id"],
            "username": username,
            "token": body["token"],
            "headers": {"Authorization": f"Bearer {body['token']}"},
        }

    return _make_user


@pytest.fixture
def alice(make_user):
    return make_user("alice")


@pytest.fixture
def bob(make_user):
    return make_user("bob")


@pytest.fixture
def make_post(client):
    def _make_post(owner, **fields):
        payload = {"title": "Flat A", "price": 1200, "city": "Berlin", **fields}
        res = client.post("/api/posts", json=payload, headers=owner["headers"])
        assert res.status_code == 201, res.text
        return res.json()

    return _make_post


@pytest.fixture
def missing_id():
    return str(uuid.uuid4())
