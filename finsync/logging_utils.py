"""Mini README: Application-wide logging helpers for Finsync.

Structure:
    * get_logger - factory returning module loggers with baseline configuration.
    * configure_root_logger - one-time handler setup; later calls may only
      change the level.

Usage:
    Modules create ``LOGGER = get_logger(__name__)`` at import time, which
    installs the handler at INFO. The CLI then calls ``configure_root_logger``
    with the level from settings to adjust verbosity.
"""

from __future__ import annotations

import logging
from typing import Optional, Union

_LOGGER_INITIALISED = False


def configure_root_logger(level: Optional[Union[int, str]] = None) -> None:
    """Install the timestamped root handler once and apply ``level`` if given."""

    global _LOGGER_INITIALISED
    root_logger = logging.getLogger()
    if level is not None:
        root_logger.setLevel(level.upper() if isinstance(level, str) else level)
    if _LOGGER_INITIALISED:
        return

    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter(
            "[%(asctime)s] [%(levelname)s] %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    if level is None:
        root_logger.setLevel(logging.INFO)
    root_logger.addHandler(handler)
    _LOGGER_INITIALISED = True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module-specific logger ensuring baseline configuration."""

    if not _LOGGER_INITIALISED:
        configure_root_logger()
    return logging.getLogger(name)
