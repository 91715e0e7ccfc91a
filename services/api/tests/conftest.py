"""Shared fixtures for the API service tests.

Every test gets a fresh in-memory SQLite database (schema + seeded
categories) wired into the app through `dependency_overrides`. Outbound HTTP
is never performed: tests patch `requests` functions with `monkeypatch`.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from homelab_api import bitcoin
from homelab_api.db import get_db, init_db
from homelab_api.main import app
from homelab_api.settings import get_settings


class FakeResponse:
    """Just enough of `requests.Response` for the code under test."""

    def __init__(self, status_code=200, text="", json_data=None, reason="OK"):
        self.status_code = status_code
        self.text = text
        self.reason = reason
        self._json = json_data

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._json is None:
            raise ValueError("No JSON body")
        return self._json

    def close(self):
        pass


@pytest.fixture
def fake_response():
    return FakeResponse


@pytest.fixture(autouse=True)
def _reset_process_state():
    get_settings.cache_clear()
    bitcoin.clear_cache()
    yield
    get_settings.cache_clear()
    bitcoin.clear_cache()


@pytest.fixture
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client(session_factory):
    def _get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = _get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_service(client):
    def _make(**overrides):
        body = {
            "name": "Jellyfin",
            "url": "http://jellyfin.lan:8096",
            "category": "Docker",
            "description": "Media server",
            "provider": "Self-hosted",
        }
        body.update(overrides)
        resp = client.post("/api/v1/services", json=body)
        assert resp.status_code == 201, resp.text
        return resp.json()["service"]

    return _make
