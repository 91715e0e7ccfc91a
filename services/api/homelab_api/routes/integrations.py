"""Integration settings routes (currently only Glances)."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..db import get_db
from ..schemas import ConnectionTestResult, GlancesSettingsIn
from ..system_health import check_connection, load_glances_settings, public_view, save_glances_settings

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("/glances")
def get_glances_settings(db: Session = Depends(get_db)):
    """Stored Glances settings. The password is never returned; `has_password` flags it."""
    return {"ok": True, "settings": public_view(load_glances_settings(db))}


@router.post("/glances")
def update_glances_settings(payload: GlancesSettingsIn, db: Session = Depends(get_db)):
    """Save Glances settings. Omitting `password` keeps the stored password."""
    saved = save_glances_settings(db, payload)
    return {"ok": True, "settings": public_view(saved)}


@router.post("/glances/test")
def test_glances_connection(payload: GlancesSettingsIn, db: Session = Depends(get_db)):
    """Try the supplied settings against Glances without saving them.

    Connection problems are reported in the body (`success=false`), not as
    HTTP errors, so the settings form can show the reason inline.
    """
    success, error = check_connection(payload, db)
    return {"ok": True, "result": ConnectionTestResult(success=success, error=error)}
