"""Job-related API routes.

These endpoints expose lightweight job triggering to support local development
and operational workflows.

Note:
- The same sweep runs on a schedule in the `status_sweep` job; this endpoint
  exists for "check everything now" buttons and debugging. It runs inside the
  request, so expect it to take up to (services x probe timeout) seconds.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..db import get_db
from ..probes import check_all_services

router = APIRouter()


@router.post("/jobs/check_services")
def check_services(db: Session = Depends(get_db)):
    """Probe every service and persist each status.

    Implementation details:
        - Services (hidden ones included) are probed sequentially in id order.
        - Each probe is an HTTP HEAD with the configured timeout; see
          `homelab_api.probes` for the classification rules.
        - Each result is committed as soon as it is known.

    Args:
        db: SQLAlchemy session (injected).

    Returns:
        dict: `{ "ok": true, "checked": n, "online": n, "warning": n, "offline": n }`.
    """
    summary = check_all_services(db)
    return {"ok": True, **summary}
