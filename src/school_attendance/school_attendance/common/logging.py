from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Install one console handler on the root logger (idempotent)."""

    root = logging.getLogger()
    root.setLevel(level.upper())
    if any(getattr(h, "_school_attendance", False) for h in root.handlers):
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._school_attendance = True  # type: ignore[attr-defined]
    root.addHandler(handler)
