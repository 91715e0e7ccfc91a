"""Dashboard widget routes: Bitcoin price and system health."""

import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import bitcoin
from ..db import get_db
from ..errors import UpstreamError
from ..system_health import current_health

logger = logging.getLogger(__name__)

router = APIRouter(tags=["widgets"])


@router.get("/bitcoin")
def bitcoin_price():
    """Current BTC/USD quote from CoinGecko (cached briefly in process).

    Returns:
        dict: `{ "ok": true, "bitcoin": {"price", "change_24h", "market_cap", "volume", "last_updated"} }`.

    Raises:
        HTTPException: 502 with the upstream reason when CoinGecko fails,
            rate-limits us, or returns an unexpected body.
    """
    try:
        quote = bitcoin.fetch_quote()
    except UpstreamError as exc:
        logger.warning("Bitcoin API error: %s", exc)
        raise HTTPException(status_code=502, detail=f"Failed to fetch Bitcoin data: {exc.message}")
    return {"ok": True, "bitcoin": quote}


@router.get("/system-health")
def system_health(db: Session = Depends(get_db)):
    """Host metrics for the system-health card.

    Served from Glances when that integration is enabled and reachable,
    otherwise mock values (`source` tells which).

    Returns:
        dict: `{ "ok": true, "health": {"cpu", "memory", "storage", "network_status",
        "network_down", "network_up", "source"} }`.
    """
    return {"ok": True, "health": current_health(db)}
