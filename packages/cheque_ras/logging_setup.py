"""Logging for ``cheque_ras``.

Modules log through ``get_logger("cheque_ras.<module>")`` and stay silent
(a ``NullHandler`` on the ``cheque_ras`` logger) until the CLI calls
:func:`configure_logging`, which sends everything to stderr at the level
given on the command line or in ``CHEQUE_RAS_LOG_LEVEL``.
"""

from __future__ import annotations

import logging
import os

_PKG_LOGGER_NAME = "cheque_ras"
_LEVEL_ENV_VAR = "CHEQUE_RAS_LOG_LEVEL"
_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_CONFIGURED = False


def _parse_level(level: int | str | None) -> int:
    """Resolve ``level`` (int, name or digits); ``None`` reads the env var.

    Anything unrecognised falls back to ``INFO``.
    """

    if isinstance(level, int):
        return level
    text = (level if level is not None else os.getenv(_LEVEL_ENV_VAR, "")).strip().upper()
    if text.isdigit():
        return int(text)
    numeric = logging.getLevelNamesMapping().get(text)
    return numeric if numeric is not None else logging.INFO


def configure_logging(level: int | str | None = None) -> int:
    """Attach the stderr handler to the package logger; later calls are no-ops.

    Returns the level in effect.
    """

    global _CONFIGURED
    logger = logging.getLogger(_PKG_LOGGER_NAME)
    if _CONFIGURED:
        return logger.level

    for h in list(logger.handlers):
        if isinstance(h, logging.NullHandler):
            logger.removeHandler(h)

    resolved = _parse_level(level)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(resolved)
    # The root logger would print everything a second time.
    logger.propagate = False

    _CONFIGURED = True
    return resolved


def get_logger(name: str) -> logging.Logger:
    pkg_logger = logging.getLogger(_PKG_LOGGER_NAME)
    if not _CONFIGURED and not pkg_logger.handlers:
        pkg_logger.addHandler(logging.NullHandler())
    return logging.getLogger(name)
