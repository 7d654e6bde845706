# ontoalgebra/verbosity.py
"""
Logging setup shared by the CLI and the library modules.

Verbosity levels:
  0 — warnings and errors only
  1 — info (operation lifecycle, collaborator target)
  2 — debug (prompt sizes, extraction strategy, raw payload keys)
"""
from __future__ import annotations

import logging
import os

_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"

_LEVELS = {
    0: logging.WARNING,
    1: logging.INFO,
    2: logging.DEBUG,
}


def default_verbosity() -> int:
    try:
        return int(os.getenv("ONTOALGEBRA_VERBOSITY", "0"))
    except ValueError:
        return 0


def setup_logging(verbosity: int = 0) -> None:
    """Configure the ``ontoalgebra`` logger tree for the given verbosity."""
    level = _LEVELS.get(max(0, min(verbosity, 2)), logging.WARNING)
    root = logging.getLogger("ontoalgebra")
    root.setLevel(level)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        root.addHandler(handler)
    for h in root.handlers:
        h.setLevel(level)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
