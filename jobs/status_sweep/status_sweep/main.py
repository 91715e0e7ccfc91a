"""Status-sweep job entrypoint.

Probes every service registered in the dashboard database and stores the
resulting status, so the dashboard shows fresh badges without anyone clicking
"check".

Configuration (environment, see `homelab_api.settings.Settings`):
    DATABASE_URL            same database as the API service
    SWEEP_INTERVAL_SECONDS  0 (default) = run once and exit; >0 = loop forever
    PROBE_TIMEOUT_SECONDS   per-service probe timeout

Run with `python -m status_sweep.main` or the `homelab-status-sweep` script.
"""

import logging
import time

from homelab_api.db import SessionLocal, init_db
from homelab_api.probes import check_all_services
from homelab_api.settings import get_settings
from homelab_common.logging import setup_logging

logger = logging.getLogger(__name__)


def sweep_once() -> dict:
    """Run a single sweep in a fresh session and return its summary."""
    db = SessionLocal()
    try:
        return check_all_services(db)
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def main() -> int:
    """Entrypoint for the status-sweep job container.

    In one-shot mode any failure propagates so schedulers see a non-zero exit
    and can retry/alert. In loop mode a failed sweep is logged and retried on
    the next tick.

    Returns:
        int: The process exit code (0 = success).
    """
    settings = get_settings()
    setup_logging("sweep", level=settings.log_level, log_file=settings.log_file)
    init_db()

    interval = settings.sweep_interval_seconds
    if interval <= 0:
        sweep_once()
        return 0

    logger.info("Status sweep running every %ds", interval)
    try:
        while True:
            try:
                sweep_once()
            except Exception:
                logger.exception("Status sweep failed")
            time.sleep(interval)
    except KeyboardInterrupt:
        logger.info("Status sweep stopped")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
