"""
Shared utilities.

Logger factory used by every module in the package.
"""
import logging
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

_configured = False


def configure_logging(level: Optional[str] = None) -> None:
    """Attach a single stream handler to the package root logger."""
    global _configured

    root = logging.getLogger("careon")
    if level:
        root.setLevel(level.upper())

    if _configured:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    root.propagate = False
    if not level:
        root.setLevel(logging.INFO)
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Get a logger configured with the package handler."""
    configure_logging()
    return logging.getLogger(name)
