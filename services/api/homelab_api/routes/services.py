"""Service directory routes.

Responsibilities:
- CRUD for monitored services (`/services`, `/services/{id}`)
- search / category filtering for the services grid
- hidden-services listing and dashboard status counts
- on-demand reachability checks (`/services/{id}/check`)

Status values are written only by the probe (see `homelab_api.probes`);
clients cannot set them directly.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session

from ..db import get_db
from ..models import Service, ServiceStatus
from ..probes import check_service
from ..schemas import ServiceCreate, ServiceOut, ServiceStats, ServiceUpdate, StatusCheckOut
from .common import LIKE_ESCAPE, apply_updates, get_or_404, like_pattern

router = APIRouter(tags=["services"])

SEARCH_FIELDS = (Service.name, Service.description, Service.provider, Service.category)


def _service_filters(search: str | None, category: str | None, include_hidden: bool) -> list:
    conds = []
    if not include_hidden:
        conds.append(Service.hidden.is_(False))

    q = (search or "").strip()
    if q:
        pattern = like_pattern(q)
        conds.append(
            or_(*[func.lower(func.coalesce(col, "")).like(pattern, escape=LIKE_ESCAPE) for col in SEARCH_FIELDS])
        )

    c = (category or "").strip()
    if c and c != "All":
        conds.append(Service.category == c)
    return conds


def _out(services) -> list[ServiceOut]:
    return [ServiceOut.model_validate(s) for s in services]


@router.get("/services")
def list_services(
    db: Session = Depends(get_db),
    search: str | None = Query(
        default=None,
        description="Case-insensitive substring match across name, description, provider and category.",
    ),
    category: str | None = Query(
        default=None,
        description='Exact category name. "All" (or empty) disables the filter.',
    ),
    include_hidden: bool = Query(default=False, description="If true, hidden services are included."),
    include_total: bool = Query(
        default=False,
        description="If true, also return `total` rows matching the filter (ignores pagination).",
    ),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
):
    """List services in id order with optional search, category filter and pagination.

    Filtering behavior:
      - `search` is trimmed; when non-empty it matches (case-insensitively, as a
        literal substring) against name, description, provider and category.
      - `category` is an exact match; "All" means no category filter.
      - When both are given they are combined with AND.
      - Hidden services are excluded unless `include_hidden=true`.

    Args:
        db: SQLAlchemy session (injected).
        search: Optional free-text filter.
        category: Optional category filter.
        include_hidden: Include services flagged as hidden.
        include_total: If true, include the total number of matching rows in the response.
        limit: Maximum number of services to return.
        offset: Row offset for pagination.

    Returns:
        dict: `{ "ok": true, "services": [...], "total": <int> }`
        - `total` is only included when `include_total=true`.
    """
    conds = _service_filters(search, category, include_hidden)

    rows = db.scalars(
        select(Service).where(*conds).order_by(Service.id).limit(limit).offset(offset)
    ).all()

    resp = {"ok": True, "services": _out(rows)}

    if include_total:
        total = db.scalar(select(func.count()).select_from(Service).where(*conds))
        resp["total"] = int(total or 0)

    return resp


@router.get("/services/hidden")
def list_hidden_services(db: Session = Depends(get_db)):
    """List only services flagged as hidden.

    Returns:
        dict: `{ "ok": true, "services": [...] }`.
    """
    rows = db.scalars(select(Service).where(Service.hidden.is_(True)).order_by(Service.id)).all()
    return {"ok": True, "services": _out(rows)}


@router.get("/services/stats")
def service_stats(db: Session = Depends(get_db)):
    """Status counts for the dashboard header cards.

    Only visible services are counted. Services that were never probed
    (`unknown`) are reported as offline.

    Returns:
        dict: `{ "ok": true, "stats": {"total", "online", "warning", "offline"} }`.
    """
    rows = db.execute(
        select(Service.status, func.count())
        .where(Service.hidden.is_(False))
        .group_by(Service.status)
    ).all()

    stats = ServiceStats()
    for status, count in rows:
        stats.total += count
        if status == ServiceStatus.ONLINE.value:
            stats.online += count
        elif status == ServiceStatus.WARNING.value:
            stats.warning += count
        else:
            stats.offline += count

    return {"ok": True, "stats": stats}


@router.get("/services/{service_id}")
def get_service(service_id: int, db: Session = Depends(get_db)):
    """Fetch a single service.

    Raises:
        HTTPException: 404 if the service does not exist.
    """
    service = get_or_404(db, Service, service_id, "Service")
    return {"ok": True, "service": ServiceOut.model_validate(service)}


@router.post("/services", status_code=201)
def create_service(payload: ServiceCreate, db: Session = Depends(get_db)):
    """Create a service. New services start with status `unknown`.

    Args:
        payload: Validated service fields. Empty optional strings arrive as null.
        db: SQLAlchemy session (injected).

    Returns:
        dict: `{ "ok": true, "service": {...} }` with HTTP 201.
    """
    service = Service(**payload.model_dump(), status=ServiceStatus.UNKNOWN.value)
    db.add(service)
    db.commit()
    db.refresh(service)
    return {"ok": True, "service": ServiceOut.model_validate(service)}


@router.put("/services/{service_id}")
def update_service(service_id: int, payload: ServiceUpdate, db: Session = Depends(get_db)):
    """Partially update a service.

    Only the fields present in the request body are written, so omitting a
    field leaves it untouched while sending `""` clears an optional field.

    Raises:
        HTTPException: 404 if the service does not exist.
    """
    service = get_or_404(db, Service, service_id, "Service")
    apply_updates(service, payload.model_dump(exclude_unset=True))
    db.commit()
    db.refresh(service)
    return {"ok": True, "service": ServiceOut.model_validate(service)}


@router.delete("/services/{service_id}")
def delete_service(service_id: int, db: Session = Depends(get_db)):
    """Delete a service.

    Raises:
        HTTPException: 404 if the service does not exist.
    """
    service = get_or_404(db, Service, service_id, "Service")
    db.delete(service)
    db.commit()
    return {"ok": True, "deleted": service_id}


@router.post("/services/{service_id}/check")
def check_service_status(service_id: int, db: Session = Depends(get_db)):
    """Probe the service URL now and persist the resulting status.

    The probe is best-effort: unreachable services are reported as `offline`
    rather than failing the request.

    Returns:
        dict: `{ "ok": true, "result": {"id", "status", "last_checked"} }`.

    Raises:
        HTTPException: 404 if the service does not exist.
    """
    service = get_or_404(db, Service, service_id, "Service")
    check_service(db, service)
    return {
        "ok": True,
        "result": StatusCheckOut(id=service.id, status=service.status, last_checked=service.last_checked),
    }
