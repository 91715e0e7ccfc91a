"""System-health widget: live metrics from Glances, or mock values.

Glances (https://nicolargo.github.io/glances/) exposes a REST API on port
61208 when started with `glances -w`. When the integration is enabled and
reachable, CPU/memory/root-filesystem usage and network throughput are read
from `/api/4/...`. Otherwise the widget falls back to plausible random values
so the dashboard still renders.

Integration settings live in the `app_settings` table under the `glances` key.
"""

import json
import logging
import random

import requests
from sqlalchemy.orm import Session

from .errors import UpstreamError
from .models import AppSetting
from .schemas import GlancesSettingsIn, GlancesSettingsOut, SystemHealth
from .settings import get_settings

logger = logging.getLogger(__name__)

GLANCES_KEY = "glances"
API_PREFIX = "/api/4"


# ---------------------------------------------------------------------------
# Settings persistence
# ---------------------------------------------------------------------------

def load_glances_settings(db: Session) -> dict:
    row = db.get(AppSetting, GLANCES_KEY)
    stored = json.loads(row.value) if row else {}
    return {
        "url": stored.get("url") or get_settings().glances_default_url,
        "username": stored.get("username"),
        "password": stored.get("password"),
        "enabled": bool(stored.get("enabled", False)),
    }


def public_view(settings: dict) -> GlancesSettingsOut:
    return GlancesSettingsOut(
        url=settings["url"],
        username=settings.get("username"),
        enabled=settings["enabled"],
        has_password=bool(settings.get("password")),
    )


def save_glances_settings(db: Session, payload: GlancesSettingsIn) -> dict:
    """Upsert the Glances settings. An omitted password keeps the stored one."""
    current = load_glances_settings(db)
    updated = {
        "url": payload.url.rstrip("/"),
        "username": payload.username,
        "password": payload.password if payload.password is not None else current.get("password"),
        "enabled": payload.enabled,
    }

    row = db.get(AppSetting, GLANCES_KEY)
    if row is None:
        row = AppSetting(key=GLANCES_KEY, value=json.dumps(updated))
        db.add(row)
    else:
        row.value = json.dumps(updated)
    db.commit()
    logger.info("Glances settings saved (url=%s, enabled=%s)", updated["url"], updated["enabled"])
    return updated


# ---------------------------------------------------------------------------
# Glances client
# ---------------------------------------------------------------------------

def _glances_get(settings: dict, path: str):
    auth = None
    if settings.get("username"):
        auth = (settings["username"], settings.get("password") or "")
    url = f"{settings['url'].rstrip('/')}{API_PREFIX}{path}"
    try:
        resp = requests.get(url, auth=auth, timeout=get_settings().glances_timeout_seconds)
    except requests.RequestException as exc:
        raise UpstreamError(f"Could not connect to Glances: {exc}") from exc
    if resp.status_code == 401:
        raise UpstreamError("Glances rejected the credentials", status_code=401)
    if not resp.ok:
        raise UpstreamError(f"Glances returned HTTP {resp.status_code}", status_code=resp.status_code)
    try:
        return resp.json()
    except ValueError as exc:
        raise UpstreamError("Glances returned a non-JSON response") from exc


def _root_fs_percent(filesystems) -> float:
    if not filesystems:
        return 0.0
    for fs in filesystems:
        if fs.get("mnt_point") == "/":
            return float(fs.get("percent") or 0)
    return float(filesystems[0].get("percent") or 0)


def _mbps(interfaces, rate_key: str, legacy_key: str) -> float:
    total = 0.0
    for iface in interfaces or []:
        if (iface.get("interface_name") or "").startswith("lo"):
            continue
        total += float(iface.get(rate_key, iface.get(legacy_key)) or 0)
    return round(total * 8 / 1_000_000, 2)


def fetch_glances_health(settings: dict) -> SystemHealth:
    """Read current metrics from a Glances instance.

    Raises:
        UpstreamError: If any Glances call fails or returns an unexpected payload.
    """
    quicklook = _glances_get(settings, "/quicklook")
    filesystems = _glances_get(settings, "/fs")
    interfaces = _glances_get(settings, "/network")

    if not isinstance(quicklook, dict) or not isinstance(filesystems, list) or not isinstance(interfaces, list):
        raise UpstreamError("Glances returned an unexpected payload")

    try:
        return SystemHealth(
            cpu=round(float(quicklook.get("cpu") or 0), 1),
            memory=round(float(quicklook.get("mem") or 0), 1),
            storage=round(_root_fs_percent(filesystems), 1),
            network_status="Optimal" if interfaces else "Unavailable",
            network_down=_mbps(interfaces, "bytes_recv_rate_per_sec", "rx"),
            network_up=_mbps(interfaces, "bytes_sent_rate_per_sec", "tx"),
            source="glances",
        )
    except (AttributeError, TypeError, ValueError) as exc:
        raise UpstreamError("Glances returned an unexpected payload") from exc


def check_connection(payload: GlancesSettingsIn, db: Session | None = None) -> tuple[bool, str | None]:
    """Check that Glances answers with the supplied settings.

    When `payload.password` is omitted and `db` is given, the stored password
    is used so the UI does not have to re-enter it.
    """
    password = payload.password
    if password is None and db is not None:
        password = load_glances_settings(db).get("password")
    settings = {"url": payload.url, "username": payload.username, "password": password}
    try:
        _glances_get(settings, "/status")
    except UpstreamError as exc:
        return False, exc.message
    return True, None


def mock_health(rng: random.Random | None = None) -> SystemHealth:
    rng = rng or random
    return SystemHealth(
        cpu=rng.randint(10, 50),
        memory=rng.randint(30, 80),
        storage=rng.randint(20, 80),
        network_status="Optimal",
        network_down=rng.randint(50, 250),
        network_up=rng.randint(25, 125),
        source="mock",
    )


def current_health(db: Session) -> SystemHealth:
    """Live Glances metrics when enabled and reachable, mock values otherwise."""
    settings = load_glances_settings(db)
    if settings["enabled"]:
        try:
            return fetch_glances_health(settings)
        except UpstreamError as exc:
            logger.warning("Glances unavailable, serving mock system health: %s", exc)
    return mock_health()
