"""Logging configuration for garden.

Library modules only ever do::

    import logging
    log = logging.getLogger(__name__)

Applications embedding garden call :func:`configure_logging` once at
startup.  Without a level argument it is taken from ``GARDEN_LOG_LEVEL``
(see :class:`garden.config.Settings`).
"""

from __future__ import annotations

import logging
import sys


def configure_logging(level: str | int | None = None) -> logging.Logger:
    """Attach a stderr handler to the ``garden`` logger.

    Subsequent calls are no-ops.
    """
    root_logger = logging.getLogger("garden")

    if root_logger.handlers:
        return root_logger

    if level is None:
        from garden.config import Settings

        level = Settings().log_level
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt="[%(levelname)s] %(name)s: %(message)s"))

    root_logger.setLevel(level)
    root_logger.addHandler(handler)
    # Avoid duplicate messages through the root logger
    root_logger.propagate = False
    return root_logger
