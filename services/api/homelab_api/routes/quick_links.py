"""Quick-link routes (bookmark tiles shown next to the services grid)."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy import select
from sqlalchemy.orm import Session

from ..db import get_db
from ..models import QuickLink
from ..schemas import QuickLinkCreate, QuickLinkOut, QuickLinkUpdate
from .common import apply_updates, get_or_404

router = APIRouter(tags=["quick-links"])


@router.get("/quick-links")
def list_quick_links(
    db: Session = Depends(get_db),
    category: str | None = Query(default=None, description="Exact category name to filter on."),
):
    """List quick links in creation (id) order.

    Args:
        db: SQLAlchemy session (injected).
        category: Optional exact category filter.

    Returns:
        dict: `{ "ok": true, "quick_links": [...] }`.
    """
    stmt = select(QuickLink).order_by(QuickLink.id)
    if category:
        stmt = stmt.where(QuickLink.category == category)
    rows = db.scalars(stmt).all()
    return {"ok": True, "quick_links": [QuickLinkOut.model_validate(q) for q in rows]}


@router.get("/quick-links/{link_id}")
def get_quick_link(link_id: int, db: Session = Depends(get_db)):
    link = get_or_404(db, QuickLink, link_id, "Quick link")
    return {"ok": True, "quick_link": QuickLinkOut.model_validate(link)}


@router.post("/quick-links", status_code=201)
def create_quick_link(payload: QuickLinkCreate, db: Session = Depends(get_db)):
    link = QuickLink(**payload.model_dump())
    db.add(link)
    db.commit()
    db.refresh(link)
    return {"ok": True, "quick_link": QuickLinkOut.model_validate(link)}


@router.put("/quick-links/{link_id}")
def update_quick_link(link_id: int, payload: QuickLinkUpdate, db: Session = Depends(get_db)):
    link = get_or_404(db, QuickLink, link_id, "Quick link")
    apply_updates(link, payload.model_dump(exclude_unset=True))
    db.commit()
    db.refresh(link)
    return {"ok": True, "quick_link": QuickLinkOut.model_validate(link)}


@router.delete("/quick-links/{link_id}")
def delete_quick_link(link_id: int, db: Session = Depends(get_db)):
    link = get_or_404(db, QuickLink, link_id, "Quick link")
    db.delete(link)
    db.commit()
    return {"ok": True, "deleted": link_id}
