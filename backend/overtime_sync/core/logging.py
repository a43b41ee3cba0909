"""Logging setup for the server entrypoint."""
from __future__ import annotations

import logging

from .config import get_settings

_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configure root logging from settings unless a level is given."""

    resolved = (level or get_settings().log_level).upper()
    logging.basicConfig(level=resolved, format=_FORMAT, force=True)
    logging.getLogger("apscheduler").setLevel(logging.WARNING)
