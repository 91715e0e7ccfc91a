"""RSS feed subscription and aggregation routes.

Responsibilities:
- CRUD for feed subscriptions (`/rss-feeds`)
- fetching a single feed's items (`/rss-feeds/{id}/items`)
- the merged, newest-first news widget (`/rss/combined`)

Feeds are fetched live on every request; there is no item storage.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.orm import Session

from ..db import get_db
from ..errors import UpstreamError
from ..models import RssFeed, utcnow
from ..rss import combined_items, fetch_feed
from ..schemas import RssFeedCreate, RssFeedOut, RssFeedUpdate
from .common import apply_updates, get_or_404

logger = logging.getLogger(__name__)

router = APIRouter(tags=["rss"])


@router.get("/rss-feeds")
def list_rss_feeds(
    db: Session = Depends(get_db),
    active_only: bool = Query(default=False, description="If true, only feeds with is_active=true."),
):
    """List feed subscriptions in id order."""
    stmt = select(RssFeed).order_by(RssFeed.id)
    if active_only:
        stmt = stmt.where(RssFeed.is_active.is_(True))
    rows = db.scalars(stmt).all()
    return {"ok": True, "feeds": [RssFeedOut.model_validate(f) for f in rows]}


@router.get("/rss-feeds/{feed_id}")
def get_rss_feed(feed_id: int, db: Session = Depends(get_db)):
    feed = get_or_404(db, RssFeed, feed_id, "RSS feed")
    return {"ok": True, "feed": RssFeedOut.model_validate(feed)}


@router.post("/rss-feeds", status_code=201)
def create_rss_feed(payload: RssFeedCreate, db: Session = Depends(get_db)):
    feed = RssFeed(**payload.model_dump())
    db.add(feed)
    db.commit()
    db.refresh(feed)
    return {"ok": True, "feed": RssFeedOut.model_validate(feed)}


@router.put("/rss-feeds/{feed_id}")
def update_rss_feed(feed_id: int, payload: RssFeedUpdate, db: Session = Depends(get_db)):
    """Partially update a feed; `updated_at` is bumped on every update."""
    feed = get_or_404(db, RssFeed, feed_id, "RSS feed")
    apply_updates(feed, payload.model_dump(exclude_unset=True))
    feed.updated_at = utcnow()
    db.commit()
    db.refresh(feed)
    return {"ok": True, "feed": RssFeedOut.model_validate(feed)}


@router.delete("/rss-feeds/{feed_id}")
def delete_rss_feed(feed_id: int, db: Session = Depends(get_db)):
    feed = get_or_404(db, RssFeed, feed_id, "RSS feed")
    db.delete(feed)
    db.commit()
    return {"ok": True, "deleted": feed_id}


@router.get("/rss-feeds/{feed_id}/items")
def rss_feed_items(feed_id: int, db: Session = Depends(get_db)):
    """Fetch and parse one feed now.

    Returns:
        dict: `{ "ok": true, "feed_id": ..., "items": [...] }` (items tagged with the feed name).

    Raises:
        HTTPException: 404 if the feed does not exist; 502 if the upstream fetch fails.
    """
    feed = get_or_404(db, RssFeed, feed_id, "RSS feed")
    try:
        items = fetch_feed(feed.url)
    except UpstreamError as exc:
        logger.warning("RSS feed %s failed: %s", feed.url, exc)
        raise HTTPException(status_code=502, detail=f"Failed to fetch RSS feed: {exc.message}")

    for item in items:
        item.feed_name = feed.name
    return {"ok": True, "feed_id": feed.id, "items": items}


@router.get("/rss/combined")
def rss_combined(
    db: Session = Depends(get_db),
    limit: int | None = Query(default=None, ge=1, le=200, description="Defaults to RSS_COMBINED_LIMIT."),
):
    """Merged items from every active feed, newest first.

    Feeds that fail to fetch are skipped (and logged), so this endpoint only
    returns an empty list, never an error, when every feed is down.

    Returns:
        dict: `{ "ok": true, "items": [...] }`.
    """
    feeds = db.scalars(select(RssFeed).where(RssFeed.is_active.is_(True)).order_by(RssFeed.id)).all()
    return {"ok": True, "items": combined_items(feeds, limit=limit)}
