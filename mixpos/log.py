"""File logging setup; the terminal belongs to the Textual UI."""

from __future__ import annotations

import logging
from pathlib import Path

from mixpos.config import LOG_LEVEL, LOG_PATH

_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(path: str = LOG_PATH, level: str = LOG_LEVEL) -> None:
    """Route the ``mixpos`` logger hierarchy to a log file."""
    log_file = Path(path)
    log_file.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(logging.Formatter(_FORMAT))

    root = logging.getLogger("mixpos")
    root.setLevel(level)
    for existing in list(root.handlers):
        root.removeHandler(existing)
        existing.close()
    root.addHandler(handler)
    root.propagate = False
