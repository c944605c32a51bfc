# conftest.py
# Shared pytest setup: the backend reads its config at import time, so the
# environment has to be in place before any test module imports backend.*

import os
import shutil
import tempfile
from pathlib import Path

import pytest

_TEST_DB_DIR = tempfile.mkdtemp(prefix="project_tracker_test_")

os.environ["ENV"] = "dev"
os.environ["JWT_SECRET"] = "test-secret-not-for-production"
os.environ["JWT_EXPIRES_IN"] = "7d"
os.environ["DATABASE_URL"] = f"sqlite:///{Path(_TEST_DB_DIR) / 'test.db'}"


@pytest.fixture(scope="session", autouse=True)
def _test_database():
    """Release pooled SQLite connections and remove the scratch database after the run."""
    yield
    from backend.db import dispose_engine
    dispose_engine()
    shutil.rmtree(_TEST_DB_DIR, ignore_errors=True)


@pytest.fixture
def fast_hashing(monkeypatch):
    """bcrypt at cost 12 is deliberately slow; tests that create many users use cost 4."""
    import backend.security
    monkeypatch.setattr(backend.security, "BCRYPT_ROUNDS", 4)


@pytest.fixture
def client(fast_hashing):
    """TestClient against an emptied database."""
    from fastapi.testclient import TestClient

    from backend import store
    from backend.main import app

    store.delete_all()
    # Unhandled errors must come back as 500 envelopes, not propagate into the test
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    store.delete_all()


@pytest.fixture
def register_user(client):
    """
    Factory: register a user and return (token, user, headers).

    Usage:
        token, user, headers = register_user("a@x.com")
    """
    def _register(email: str, password: str = "secret1", name: str = "Tester"):
        resp = client.post("/auth/register", json={"email": email, "password": password, "name": name})
        assert resp.status_code == 201, resp.text
        data = resp.json()["data"]
        return data["token"], data["user"], {"Authorization": f"Bearer {data['token']}"}

    return _register


@pytest.fixture
def create_project(client):
    """Factory: create a project for the given auth headers and return its JSON."""
    def _create(headers, **overrides):
        payload = {
            "name": "P1",
            "teamMember": "A",
            "deadline": "2025-01-01",
            "budget": 1000,
        }
        payload.update(overrides)
        resp = client.post("/projects", json=payload, headers=headers)
        assert resp.status_code == 201, resp.text
        return resp.json()["data"]

    return _create
