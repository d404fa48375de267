"""
Logging helpers for the table engine.

Provides a small logger factory that hands out stdlib loggers with a
consistent format. The level is read from TABLE_ENGINE_LOG_LEVEL.
"""

import logging
import os
from pathlib import Path

_LOG_LEVEL = os.getenv("TABLE_ENGINE_LOG_LEVEL", "WARNING").upper()


def logger(name: str) -> logging.Logger:
    """
    Create and configure a logger for the given name.

    If name is a file path (e.g., __file__), the module stem is used.

    Args:
        name: Logger name, usually __name__.

    Returns:
        Configured logging.Logger instance.
    """
    if "/" in name or "\\" in name:
        name = Path(name).stem

    log = logging.getLogger(name)

    # Only configure once per logger
    if not log.handlers:
        log.setLevel(getattr(logging, _LOG_LEVEL, logging.WARNING))
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
        )
        log.addHandler(handler)

    return log
