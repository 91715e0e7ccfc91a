"""Best-effort reachability probing for dashboard services.

A probe is a single HTTP HEAD against the service URL:

    response with status < 400  -> "online"
    any other HTTP response     -> "warning"   (reachable, but unhappy)
    transport failure           -> "offline"   (refused, DNS, timeout, bad URL)

Some servers answer HEAD with 405/501 even when healthy; those get one GET
retry before being classified.

Probing never raises: the whole point is to turn failures into a status.
"""

import logging

import requests
from sqlalchemy import select
from sqlalchemy.orm import Session

from .models import Service, ServiceStatus, utcnow
from .settings import get_settings

logger = logging.getLogger(__name__)

_HEAD_UNSUPPORTED = {405, 501}


def classify_response(status_code: int) -> ServiceStatus:
    return ServiceStatus.ONLINE if status_code < 400 else ServiceStatus.WARNING


def probe_url(url: str, timeout: float | None = None) -> ServiceStatus:
    """Probe `url` and classify the result.

    Args:
        url: Absolute http(s) URL of the service.
        timeout: Seconds to wait for connect/read. Defaults to
            `Settings.probe_timeout_seconds`.

    Returns:
        ServiceStatus: ONLINE, WARNING or OFFLINE (never UNKNOWN).
    """
    settings = get_settings()
    timeout = settings.probe_timeout_seconds if timeout is None else timeout
    headers = {"User-Agent": settings.http_user_agent}

    try:
        resp = requests.head(url, timeout=timeout, allow_redirects=True, headers=headers)
        if resp.status_code in _HEAD_UNSUPPORTED:
            resp = requests.get(url, timeout=timeout, allow_redirects=True, headers=headers, stream=True)
            resp.close()
    except requests.RequestException as exc:
        logger.info("probe %s -> offline (%s)", url, exc.__class__.__name__)
        return ServiceStatus.OFFLINE

    status = classify_response(resp.status_code)
    logger.info("probe %s -> %s (HTTP %s)", url, status.value, resp.status_code)
    return status


def check_service(db: Session, service: Service, timeout: float | None = None) -> Service:
    """Probe one service and persist `status` + `last_checked`.

    Commits the session.
    """
    status = probe_url(service.url, timeout=timeout)
    service.status = status.value
    service.last_checked = utcnow()
    db.commit()
    return service


def check_all_services(db: Session, timeout: float | None = None) -> dict:
    """Probe every service (hidden ones included) and persist the results.

    Services are probed sequentially in id order; each result is committed
    as soon as it is known so a crash mid-sweep keeps earlier results.

    Args:
        db: Open SQLAlchemy session.
        timeout: Per-probe timeout override.

    Returns:
        dict: `{"checked": n, "online": n, "warning": n, "offline": n}`.
    """
    summary = {"checked": 0, "online": 0, "warning": 0, "offline": 0}

    services = db.scalars(select(Service).order_by(Service.id)).all()
    for service in services:
        check_service(db, service, timeout=timeout)
        summary["checked"] += 1
        summary[service.status] += 1

    logger.info(
        "status sweep: checked=%d online=%d warning=%d offline=%d",
        summary["checked"], summary["online"], summary["warning"], summary["offline"],
    )
    return summary
