from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger once for the app and the scheduler thread."""

    root = logging.getLogger()
    if any(getattr(h, "_lab_attendance", False) for h in root.handlers):
        root.setLevel(getattr(logging, level.upper(), logging.INFO))
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._lab_attendance = True
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
