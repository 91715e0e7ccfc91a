"""FastAPI application factory / entrypoint.

This service exposes HTTP endpoints for:
- the service directory (CRUD, search, status checks)
- categories, quick links and RSS feed subscriptions
- dashboard widgets (RSS aggregation, Bitcoin price, system health)
- integration settings (Glances) and on-demand jobs
- health checks

The API is intended to be consumed by the dashboard frontend and by internal tooling.

Operational notes:
- CORS origins come from `Settings.cors_origins` (defaults suit local Vite development).
- Tables are created and default categories seeded on startup.
- Run locally with `uvicorn homelab_api.main:app --reload`.
"""

from contextlib import asynccontextmanager
import logging

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from homelab_common.logging import setup_logging

from . import __version__
from .db import get_db, init_db
from .routes import router
from .settings import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    setup_logging("api", level=settings.log_level, log_file=settings.log_file)
    init_db()
    logger.info("Homelab API %s ready", __version__)
    yield


app = FastAPI(title="Homelab Dashboard API", version=__version__, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_settings().cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(router)


@app.get("/health")
def health(db: Session = Depends(get_db)):
    """Health check endpoint.

    Returns a minimal payload used by local dev tooling, containers, and
    orchestrators (Docker Compose / Kubernetes) to determine whether the API
    process is up and able to serve requests. Database trouble is reported in
    the body rather than as an error so the process is not restarted for it.

    Returns:
        dict: `{"status": "ok", "service": "api", "database": "ok" | "error"}`.
    """
    try:
        db.execute(text("SELECT 1"))
        database = "ok"
    except SQLAlchemyError as exc:
        logger.warning("Health check database ping failed: %s", exc)
        database = "error"
    return {"status": "ok", "service": "api", "database": database}
