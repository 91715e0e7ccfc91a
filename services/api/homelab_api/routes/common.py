"""Small helpers shared by the route modules."""

from fastapi import HTTPException
from sqlalchemy.orm import Session


def get_or_404(db: Session, model, obj_id, label: str):
    obj = db.get(model, obj_id)
    if obj is None:
        raise HTTPException(status_code=404, detail=f"{label} not found")
    return obj


def apply_updates(obj, updates: dict) -> None:
    for field, value in updates.items():
        setattr(obj, field, value)


LIKE_ESCAPE = "!"


def like_pattern(term: str) -> str:
    """Wrap `term` for a case-insensitive substring LIKE using `LIKE_ESCAPE`."""
    escaped = term.lower().replace("!", "!!").replace("%", "!%").replace("_", "!_")
    return f"%{escaped}%"
