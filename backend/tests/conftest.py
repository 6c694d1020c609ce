"""Shared test fixtures."""

import os

import pytest

from _helpers import ADMIN_KEY, PROVIDER_SECRET, SESSION_SECRET, FakeDatabase, bearer, make_provider_token

# config.env reads the environment at import time
os.environ["ENV"] = "test"
os.environ["MONGODB_URI"] = "mongodb://localhost:27017/sponsor_match_test"
os.environ["JWT_SECRET"] = SESSION_SECRET
os.environ["SUPABASE_URL"] = "https://project.supabase.co"
os.environ["SUPABASE_JWT_SECRET"] = PROVIDER_SECRET
os.environ["ADMIN_API_KEY"] = ADMIN_KEY
os.environ["LOGIN_PATH"] = "/api/auth/login"
os.environ["LANDING_PATH"] = "/api/home"

from fastapi.testclient import TestClient  # noqa: E402

from database import get_db  # noqa: E402
from main import app  # noqa: E402
from utils.sessions import SessionStore, get_session_store  # noqa: E402


@pytest.fixture
def db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def store() -> SessionStore:
    return SessionStore()


@pytest.fixture
def client(db, store):
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_session_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def sign_in(client):
    """Open a session through the API and return its Authorization header."""

    def _sign_in(**claims) -> dict:
        resp = client.post("/api/auth/session", json={"access_token": make_provider_token(**claims)})
        assert resp.status_code == 200, resp.text
        return bearer(resp.json()["session_token"])

    return _sign_in
