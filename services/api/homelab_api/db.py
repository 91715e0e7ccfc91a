"""Database session and schema helpers for the API service.

This module owns the API's SQLAlchemy engine/session factory and provides the
FastAPI dependency (`get_db`) used by route handlers.

Design goals:
- single source of truth for the database URL (`Settings.database_url`)
- short-lived, request-scoped DB sessions
- schema creation + seed data on startup (no migration tooling)
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from homelab_common.db import make_engine, make_session_factory

from .models import Base, Category
from .settings import get_settings

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    ("VPS", "Virtual private servers", "#3B82F6"),
    ("Docker", "Containers running on the homelab host", "#0EA5E9"),
    ("External", "Third-party hosted services", "#A855F7"),
    ("Network", "Routers, DNS and other network gear", "#22C55E"),
]

engine = make_engine(get_settings().database_url)
SessionLocal = make_session_factory(engine)


def init_db(bind=None) -> None:
    """Create all tables and seed default categories when none exist.

    Args:
        bind: Engine to initialise. Defaults to the API service engine.
    """
    bind = bind or engine
    Base.metadata.create_all(bind=bind)

    with Session(bind) as db:
        existing = db.scalar(select(func.count()).select_from(Category))
        if existing:
            return
        for name, description, color in DEFAULT_CATEGORIES:
            db.add(Category(name=name, description=description, color=color))
        db.commit()
        logger.info("Seeded %d default categories", len(DEFAULT_CATEGORIES))


def get_db():
    """FastAPI dependency that yields a request-scoped SQLAlchemy session.

    Route handlers declare `db: Session = Depends(get_db)` to receive a session
    bound to the API service engine.

    Yields:
        sqlalchemy.orm.Session: An open SQLAlchemy session for the duration of the request.

    Notes:
        A new session is created per request and always closed in `finally`.

        Transaction boundaries are controlled by the handler. If a handler writes
        and then raises, call `db.rollback()` before re-raising so the connection
        returns to the pool in a clean state.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
