"""Logging setup for the command-line entry point."""

from __future__ import annotations

import logging
import os
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: Optional[str] = None) -> int:
    """Configure root logging from ``level`` or the ``LOG_LEVEL`` variable.

    Unknown level names fall back to INFO. Returns the numeric level applied.
    """
    name = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    numeric = getattr(logging, name, None)
    if not isinstance(numeric, int):
        numeric = logging.INFO

    logging.basicConfig(level=numeric, format=LOG_FORMAT, force=True)
    # urllib3 logs every connection at DEBUG, including full URLs.
    logging.getLogger("urllib3").setLevel(max(numeric, logging.INFO))
    return numeric
