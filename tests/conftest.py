"""Shared pytest fixtures.

Every test gets its own SQLite file under ``tmp_path`` and a fresh
application whose lifespan creates the schema and the default admin.
"""
from urllib.parse import urlparse

import pytest
from fastapi.testclient import TestClient

from app.core.app_factory import create_application
from app.core.config import Settings
from app.infrastructure.persistence.database import Database
from app.infrastructure.repositories.account_repository import AccountRepository

SECRET = "testing_secret"
CLIENT_URL = "http://client.test"
ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "admin-password"


@pytest.fixture
def settings(monkeypatch, tmp_path):
    monkeypatch.setenv("JWT_SECRET", SECRET)
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{tmp_path / 'pytest.db'}")
    monkeypatch.setenv("CLIENT_URL", CLIENT_URL)
    monkeypatch.setenv("ADMIN_EMAIL", ADMIN_EMAIL)
    monkeypatch.setenv("ADMIN_PASSWORD", ADMIN_PASSWORD)
    return Settings()


@pytest.fixture
def app(settings):
    return create_application(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as client:
        yield client


@pytest.fixture
def container(client, app):
    return app.state.container


@pytest.fixture
def admin_headers(client):
    res = client.post(
        "/api/account/login",
        json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD},
    )
    assert res.status_code == 200
    return {"Authorization": res.json()["token"]}


@pytest.fixture
def database(tmp_path):
    database = Database(f"sqlite:///{tmp_path / 'repository.db'}")
    database.create_schema()
    yield database
    database.close()


@pytest.fixture
def repository(database):
    return AccountRepository(database)


def active_token_from(active_url: str) -> str:
    return urlparse(active_url).path.rsplit("/", 1)[-1]


@pytest.fixture
def provision(client, admin_headers):
    """Register and activate an account, returning its login response body."""

    def _provision(email: str, password: str = "customer-password", role: str = "customer") -> dict:
        res = client.post(
            "/api/account/register",
            json={"email": email, "role": role},
            headers=admin_headers,
        )
        assert res.status_code == 201
        token = active_token_from(res.json()["activeUrl"])

        res = client.put(f"/api/account/active/{token}", json={"password": password})
        assert res.status_code == 200
        return res.json()

    return _provision
