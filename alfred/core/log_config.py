"""
Logging setup for the "alfred" logger tree.

Every module logs through ``logging.getLogger("alfred.<area>")``. This module
installs a single stdout handler on the root "alfred" logger so the whole tree
shares one format:

    [2025-01-15 10:00:00] INFO [alfred.services.assistant] [req-id] ...
"""

import logging
import sys

LOG_FORMAT = "[%(asctime)s] %(levelname)s [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """
    Configure the "alfred" logger.

    Safe to call more than once: the handler is only added the first time,
    later calls just update the level.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR)

    Returns:
        The configured "alfred" logger
    """
    logger = logging.getLogger("alfred")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)

    return logger
