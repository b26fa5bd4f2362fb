"""Logging setup, called once when the app module is imported."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"

_configured = False


def setup_logging(level: str = "INFO") -> None:
    global _configured
    root = logging.getLogger("pcforge")
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    if _configured:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    _configured = True
