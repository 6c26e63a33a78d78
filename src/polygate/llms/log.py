from __future__ import annotations

"""
Central logging setup for the `polygate` logger tree.

Modules log through `logging.getLogger(__name__)`; this module only decides
where those records go. Calling `configure_logging` more than once replaces
the managed handler instead of stacking duplicates.
"""

import logging
import os
import sys

_ROOT_LOGGER = "polygate"
_MANAGED_ATTR = "_polygate_managed_handler"
_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def parse_level(value: str | int | None, default: int = logging.WARNING) -> int:
    """Accept level names case-insensitively; unknown values fall back to `default`."""
    if value is None:
        return default
    if isinstance(value, int):
        return value
    return _LEVELS.get(value.strip().upper(), default)


def configure_logging(level: str | int | None = None) -> logging.Logger:
    """
    Attach one stderr handler to the `polygate` logger.

    `level` defaults to `POLYGATE_LOG_LEVEL` (WARNING when unset).
    """
    logger = logging.getLogger(_ROOT_LOGGER)
    resolved = parse_level(level if level is not None else os.getenv("POLYGATE_LOG_LEVEL"))

    for handler in list(logger.handlers):
        if getattr(handler, _MANAGED_ATTR, False):
            logger.removeHandler(handler)
            handler.close()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_FORMAT))
    handler.setLevel(resolved)
    setattr(handler, _MANAGED_ATTR, True)

    logger.addHandler(handler)
    logger.setLevel(resolved)
    return logger
