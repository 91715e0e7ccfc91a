"""Bitcoin price widget backed by the CoinGecko `simple/price` endpoint.

The public CoinGecko API is aggressively rate limited, so quotes are cached in
process for `Settings.bitcoin_cache_seconds`. Set COINGECKO_API_KEY to send a
demo key with each request.
"""

from datetime import datetime, timezone
import logging
import threading
import time

import requests

from .errors import UpstreamError
from .schemas import BitcoinQuote
from .settings import get_settings

logger = logging.getLogger(__name__)

_cache_lock = threading.Lock()
_cache: dict = {}

QUERY = {
    "ids": "bitcoin",
    "vs_currencies": "usd",
    "include_24hr_change": "true",
    "include_market_cap": "true",
    "include_24hr_vol": "true",
}


def clear_cache() -> None:
    with _cache_lock:
        _cache.clear()


def _error_message(resp) -> str:
    try:
        body = resp.json()
    except ValueError:
        body = {}
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return "Failed to fetch Bitcoin data"


def parse_quote(data) -> BitcoinQuote:
    """Turn a CoinGecko response body into a `BitcoinQuote`.

    Raises:
        UpstreamError: If the body reports an error or lacks the `bitcoin` key.
    """
    if not isinstance(data, dict):
        raise UpstreamError("Invalid API response format")

    status = data.get("status")
    if isinstance(status, dict) and status.get("error_code"):
        raise UpstreamError(status.get("error_message") or "API returned an error")

    bitcoin = data.get("bitcoin")
    if not isinstance(bitcoin, dict):
        raise UpstreamError("Invalid API response format")

    return BitcoinQuote(
        price=bitcoin.get("usd") or 0,
        change_24h=bitcoin.get("usd_24h_change") or 0,
        market_cap=bitcoin.get("usd_market_cap") or 0,
        volume=bitcoin.get("usd_24h_vol") or 0,
        last_updated=datetime.now(timezone.utc).isoformat(),
    )


def fetch_quote(use_cache: bool = True) -> BitcoinQuote:
    """Return the current BTC/USD quote, served from cache when fresh.

    Args:
        use_cache: If false, always hit CoinGecko (the result is still cached).

    Returns:
        BitcoinQuote: Price, 24h change (%), market cap and 24h volume in USD.

    Raises:
        UpstreamError: On transport errors, HTTP errors (429 gets a dedicated
            message), or malformed responses.
    """
    settings = get_settings()
    ttl = settings.bitcoin_cache_seconds

    if use_cache and ttl > 0:
        with _cache_lock:
            cached = _cache.get("quote")
            if cached and time.monotonic() - cached[0] < ttl:
                return cached[1]

    headers = {}
    if settings.coingecko_api_key:
        headers["x-cg-demo-api-key"] = settings.coingecko_api_key

    try:
        resp = requests.get(settings.coingecko_url, params=QUERY, headers=headers, timeout=10)
    except requests.RequestException as exc:
        raise UpstreamError(f"Failed to fetch Bitcoin data: {exc}") from exc

    if resp.status_code == 429:
        raise UpstreamError(
            "Rate limit exceeded. Please provide a CoinGecko API key for reliable access.",
            status_code=429,
        )
    if not resp.ok:
        raise UpstreamError(_error_message(resp), status_code=resp.status_code)

    try:
        data = resp.json()
    except ValueError as exc:
        raise UpstreamError("Invalid API response format") from exc

    quote = parse_quote(data)
    with _cache_lock:
        _cache["quote"] = (time.monotonic(), quote)
    return quote
