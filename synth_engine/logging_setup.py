"""Logging configuration shared by the CLI and embedding hosts."""
from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging; unknown level names fall back to INFO."""
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        numeric = logging.INFO

    logging.basicConfig(format=LOG_FORMAT, force=True)
    logging.getLogger().setLevel(numeric)
    logging.getLogger("aiohttp").setLevel(logging.WARNING)
