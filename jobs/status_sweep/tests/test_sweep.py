"""Tests for the status-sweep job entrypoint."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from sqlalchemy import create_engine, select
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from homelab_api import probes
from homelab_api.db import init_db
from homelab_api.models import Service, ServiceStatus
from homelab_api.settings import get_settings
from status_sweep import main as sweep


@pytest.fixture
def session_factory(monkeypatch):
    get_settings.cache_clear()
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    factory = sessionmaker(bind=engine, expire_on_commit=False)

    monkeypatch.setattr(sweep, "SessionLocal", factory)
    monkeypatch.setattr(sweep, "init_db", lambda: init_db(bind=engine))
    monkeypatch.setattr(sweep, "setup_logging", lambda *args, **kwargs: None)
    yield factory
    engine.dispose()
    get_settings.cache_clear()


def test_main_runs_one_sweep_and_exits_zero(session_factory, monkeypatch) -> None:
    monkeypatch.delenv("SWEEP_INTERVAL_SECONDS", raising=False)
    monkeypatch.setattr(
        probes, "probe_url",
        lambda url, timeout=None: ServiceStatus.ONLINE if "up" in url else ServiceStatus.OFFLINE,
    )

    sweep.init_db()
    with session_factory() as db:
        db.add_all([
            Service(name="up", url="http://up.lan", category="Docker"),
            Service(name="down", url="http://down.lan", category="VPS"),
        ])
        db.commit()

    assert sweep.main() == 0

    with session_factory() as db:
        statuses = dict(db.execute(select(Service.name, Service.status)).all())
    assert statuses == {"up": "online", "down": "offline"}


def test_sweep_once_propagates_failures(session_factory, monkeypatch) -> None:
    sweep.init_db()
    with session_factory() as db:
        db.add(Service(name="x", url="http://x.lan", category="VPS"))
        db.commit()

    def broken(db, timeout=None):
        raise RuntimeError("db exploded")

    monkeypatch.setattr(sweep, "check_all_services", broken)
    with pytest.raises(RuntimeError):
        sweep.sweep_once()
