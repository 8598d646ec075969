"""Logging setup shared by every LexiFlow module."""

import logging
import os
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%H:%M:%S"

_configured = False


def setup_logger(name: str = "lexiflow", level: Optional[str] = None) -> logging.Logger:
    """
    Get a logger under the ``lexiflow`` hierarchy.

    The root ``lexiflow`` logger gets a single stream handler the first
    time this is called; child loggers propagate to it.

    Args:
        name: Logger name (usually ``__name__``)
        level: Level name, defaults to LEXIFLOW_LOG_LEVEL or INFO

    Returns:
        Configured logger
    """
    global _configured

    root = logging.getLogger("lexiflow")
    if not _configured:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
        root.addHandler(handler)
        root.setLevel(level or os.environ.get("LEXIFLOW_LOG_LEVEL", "INFO").upper())
        _configured = True
    elif level:
        root.setLevel(level.upper())

    return logging.getLogger(name)
