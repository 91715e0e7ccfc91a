"""RSS fetching and (deliberately naive) item extraction.

Feeds are parsed with regular expressions rather than an XML parser. Real-world
feeds are frequently malformed, and the widget only needs a handful of fields
from `<item>` blocks, so "good enough" extraction is preferred over strictness.
Atom feeds (`<entry>`) are not supported.

Per item:
- title/description prefer CDATA content, falling back to the raw element text
- description has tags stripped and is truncated
- guid falls back to the item's index within the feed
- items without a title are dropped
"""

from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
import html
import logging
import re

import requests

from .errors import UpstreamError
from .schemas import RssItem
from .settings import get_settings

logger = logging.getLogger(__name__)

_ITEM_RE = re.compile(r"<item[^>]*>(.*?)</item>", re.S)
_TAG_RE = re.compile(r"<[^>]*>")


def _element_re(tag: str, cdata: bool) -> re.Pattern:
    if cdata:
        return re.compile(rf"<{tag}[^>]*><!\[CDATA\[(.*?)\]\]></{tag}>", re.S)
    return re.compile(rf"<{tag}[^>]*>(.*?)</{tag}>", re.S)


_TITLE_CDATA = _element_re("title", cdata=True)
_TITLE = _element_re("title", cdata=False)
_DESC_CDATA = _element_re("description", cdata=True)
_DESC = _element_re("description", cdata=False)
_LINK = _element_re("link", cdata=False)
_PUB_DATE = _element_re("pubDate", cdata=False)
_GUID = _element_re("guid", cdata=False)


def _first(block: str, *patterns: re.Pattern) -> str | None:
    for pattern in patterns:
        m = pattern.search(block)
        if m:
            return m.group(1)
    return None


def parse_rss_items(xml_text: str, limit: int | None = None, description_chars: int | None = None) -> list[RssItem]:
    """Extract up to `limit` items from an RSS document.

    Args:
        xml_text: Raw feed body.
        limit: Maximum number of `<item>` blocks to consider (not the number
            returned: untitled items still count toward the limit).
            Defaults to `Settings.rss_items_per_feed`.
        description_chars: Truncation length for descriptions. Defaults to
            `Settings.rss_description_chars`.

    Returns:
        list[RssItem]: Items in document order.
    """
    settings = get_settings()
    limit = settings.rss_items_per_feed if limit is None else limit
    description_chars = settings.rss_description_chars if description_chars is None else description_chars

    items = []
    for index, m in enumerate(_ITEM_RE.finditer(xml_text)):
        if index >= limit:
            break
        block = m.group(0)

        title = _first(block, _TITLE_CDATA, _TITLE) or ""
        if not title:
            continue

        description = _first(block, _DESC_CDATA, _DESC) or ""
        description = _TAG_RE.sub("", html.unescape(description)).strip()[:description_chars]

        items.append(
            RssItem(
                title=html.unescape(title).strip(),
                link=(_first(block, _LINK) or "").strip(),
                description=description,
                pub_date=_first(block, _PUB_DATE) or "",
                guid=_first(block, _GUID) or str(index),
            )
        )
    return items


def parse_pub_date(value: str) -> datetime | None:
    """Parse an RFC 822 (RSS) or ISO-8601 date into an aware UTC datetime."""
    value = (value or "").strip()
    if not value:
        return None
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def fetch_feed(url: str, limit: int | None = None) -> list[RssItem]:
    """Download and parse a single feed.

    Raises:
        UpstreamError: On transport errors or a non-2xx response.
    """
    settings = get_settings()
    headers = {
        "User-Agent": settings.http_user_agent,
        "Accept": "application/rss+xml, application/xml, text/xml",
    }
    try:
        resp = requests.get(url, headers=headers, timeout=settings.rss_timeout_seconds)
    except requests.RequestException as exc:
        raise UpstreamError(f"Failed to fetch RSS feed: {exc}") from exc

    if not resp.ok:
        raise UpstreamError(f"HTTP {resp.status_code}: {resp.reason}", status_code=resp.status_code)

    return parse_rss_items(resp.text, limit=limit)


def _sort_key(item: RssItem):
    parsed = parse_pub_date(item.pub_date)
    # undated items sort after every dated one
    return (parsed is not None, parsed or datetime.min.replace(tzinfo=timezone.utc))


def combined_items(feeds, limit: int | None = None) -> list[RssItem]:
    """Fetch several feeds and merge their items newest-first.

    A feed that fails is logged and skipped so one dead site cannot blank the
    whole widget.

    Args:
        feeds: Iterable of objects with `name` and `url` attributes (e.g. `RssFeed` rows).
        limit: Maximum number of merged items. Defaults to `Settings.rss_combined_limit`.

    Returns:
        list[RssItem]: Items tagged with `feed_name`, newest first.
    """
    limit = get_settings().rss_combined_limit if limit is None else limit

    merged = []
    for feed in feeds:
        try:
            items = fetch_feed(feed.url)
        except UpstreamError as exc:
            logger.warning("Skipping RSS feed %r (%s): %s", feed.name, feed.url, exc)
            continue
        for item in items:
            item.feed_name = feed.name
            merged.append(item)

    merged.sort(key=_sort_key, reverse=True)
    return merged[:limit]
