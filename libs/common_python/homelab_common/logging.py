"""Shared logging setup.

Every process (API, status-sweep job) calls `setup_logging` once from its
entrypoint so all components emit the same line format:

    [2024-05-01 12:00:00] [API] INFO homelab_api.probes - probe ...
"""

import logging
import sys
from pathlib import Path

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def _coerce_level(level) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).upper())
    return resolved if isinstance(resolved, int) else logging.INFO


def setup_logging(
    component_name: str,
    level=logging.INFO,
    log_file: str | None = None,
    format_string: str | None = None,
) -> logging.Logger:
    """Configure root logging for a component.

    Safe to call more than once: handlers installed by a previous call are
    replaced rather than duplicated.

    Args:
        component_name: Short component identifier (e.g. "api", "sweep").
        level: Logging level as an int or a name such as "DEBUG".
        log_file: Optional file path that receives a copy of the output.
        format_string: Custom format string (a default is provided).

    Returns:
        logging.Logger: Logger named after the component.
    """
    level = _coerce_level(level)
    if format_string is None:
        format_string = f"[%(asctime)s] [{component_name.upper()}] %(levelname)s %(name)s - %(message)s"

    formatter = logging.Formatter(format_string, datefmt=DATE_FORMAT)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path))

    for handler in handlers:
        handler.setFormatter(formatter)

    root = logging.getLogger()
    for existing in list(root.handlers):
        if getattr(existing, "_homelab_handler", False):
            root.removeHandler(existing)
            existing.close()
    for handler in handlers:
        handler._homelab_handler = True
        root.addHandler(handler)
    root.setLevel(level)

    logger = logging.getLogger(component_name)
    logger.info("%s logging initialized (level=%s)", component_name.upper(), logging.getLevelName(level))
    return logger
