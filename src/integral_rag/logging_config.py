"""
Logging Setup

Single entry point for configuring the `rag.*` logger hierarchy. Modules only
ever call `logging.getLogger("rag.<area>")`; handlers and levels are attached
here, once, by the application factory or the CLI.
"""

from __future__ import annotations

import logging
from typing import Optional

from .config import settings

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

_configured = False


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configure the root `rag` logger.

    Parameters
    ----------
    level : Optional[str]
        Log level name. Defaults to settings.log_level.
    """
    global _configured

    resolved = (level or settings.log_level).upper()
    logger = logging.getLogger("rag")
    logger.setLevel(resolved)

    if _configured:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
    _configured = True
