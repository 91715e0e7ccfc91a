"""Category management routes.

Categories are a user-editable list used to group services. Names are unique;
services store the category *name*, so renaming a category does not rewrite
existing services.
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..db import get_db
from ..models import Category
from ..schemas import CategoryCreate, CategoryOut, CategoryUpdate
from .common import apply_updates, get_or_404

router = APIRouter(tags=["categories"])


def _commit_unique(db: Session, name: str | None) -> None:
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(status_code=409, detail=f"Category '{name}' already exists")


@router.get("/categories")
def list_categories(db: Session = Depends(get_db)):
    """List categories alphabetically."""
    rows = db.scalars(select(Category).order_by(Category.name)).all()
    return {"ok": True, "categories": [CategoryOut.model_validate(c) for c in rows]}


@router.get("/categories/{category_id}")
def get_category(category_id: int, db: Session = Depends(get_db)):
    category = get_or_404(db, Category, category_id, "Category")
    return {"ok": True, "category": CategoryOut.model_validate(category)}


@router.post("/categories", status_code=201)
def create_category(payload: CategoryCreate, db: Session = Depends(get_db)):
    """Create a category.

    Raises:
        HTTPException: 409 if a category with the same name exists.
    """
    category = Category(**payload.model_dump())
    db.add(category)
    _commit_unique(db, payload.name)
    db.refresh(category)
    return {"ok": True, "category": CategoryOut.model_validate(category)}


@router.put("/categories/{category_id}")
def update_category(category_id: int, payload: CategoryUpdate, db: Session = Depends(get_db)):
    """Partially update a category.

    Raises:
        HTTPException: 404 if missing; 409 if the new name is taken.
    """
    category = get_or_404(db, Category, category_id, "Category")
    apply_updates(category, payload.model_dump(exclude_unset=True))
    _commit_unique(db, payload.name)
    db.refresh(category)
    return {"ok": True, "category": CategoryOut.model_validate(category)}


@router.delete("/categories/{category_id}")
def delete_category(category_id: int, db: Session = Depends(get_db)):
    category = get_or_404(db, Category, category_id, "Category")
    db.delete(category)
    db.commit()
    return {"ok": True, "deleted": category_id}
