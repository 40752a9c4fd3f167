"""Logging setup shared by entry points."""
from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str | int = "INFO") -> None:
    """Configure the root logger once for the whole process."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logging.basicConfig(level=level, format=LOG_FORMAT)
    # aiohttp access/client chatter is noise at INFO
    logging.getLogger("aiohttp").setLevel(max(level, logging.WARNING))
