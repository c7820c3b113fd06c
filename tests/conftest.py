from __future__ import annotations

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from config.settings import settings
from database import connection
from api.middleware.rate_limit import limiter
from services.evaluator import get_evaluator

from factories import FakeEvaluator


@pytest.fixture
def test_settings(tmp_path, monkeypatch):
    """Point the app at a throwaway SQLite database and data directory."""
    monkeypatch.setattr(settings, "database_url", f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    monkeypatch.setattr(settings, "database_auto_create", True)
    monkeypatch.setattr(settings, "data_dir", tmp_path / "data")
    monkeypatch.setattr(settings, "public_files_url", "http://testserver/files")
    monkeypatch.setattr(settings, "bcrypt_rounds", 4)
    monkeypatch.setattr(settings, "copilot_workflow_url", None)
    monkeypatch.setattr(connection, "_engine", None)
    monkeypatch.setattr(connection, "_session_factory", None)
    monkeypatch.setattr(limiter, "enabled", False)
    return settings


@pytest_asyncio.fixture
async def db(test_settings):
    """Fresh schema for tests that use the storage layer directly."""
    await connection.init_db()
    yield
    await connection.close_db()


@pytest.fixture
def fake_evaluator():
    return FakeEvaluator()


@pytest.fixture
def client(test_settings, fake_evaluator):
    from api.main import app

    app.dependency_overrides[get_evaluator] = lambda: fake_evaluator
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def register_and_login(client: TestClient, email: str, password: str = "secret123") -> dict:
    response = client.post("/api/auth/register", json={"email": email, "password": password})
    assert response.status_code == 201, response.text
    response = client.post("/api/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def auth_headers(client):
    return register_and_login(client, "owner@example.com")


@pytest.fixture
def other_headers(client):
    return register_and_login(client, "other@example.com")
