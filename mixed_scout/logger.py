# === FILE: mixed_scout/logger.py ===
"""Logging setup for **MixedScout**.

Diagnostics always go to *stderr*: *stdout* is reserved for the findings and
the visited list, so it can be piped into other tools.  An optional rotating
log file receives the same records.

Modules log through the shared instance::

    from mixed_scout.logger import logger
    logger.debug("Admitted %s", url)

The CLI calls :func:`init_logging` once its options are parsed.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, List, Optional, Union

DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
LOGGER_NAME: Final[str] = "MixedScout"

LOG_FILE_MAX_BYTES: Final[int] = 5 * 1024 * 1024
LOG_FILE_BACKUPS: Final[int] = 3

_LevelT = Union[int, str]
_PathT = Union[str, Path]


def _make_handlers(log_file: Optional[_PathT], log_format: str) -> List[logging.Handler]:
    formatter = logging.Formatter(log_format)
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file is not None:
        handlers.append(
            RotatingFileHandler(
                filename=str(log_file),
                maxBytes=LOG_FILE_MAX_BYTES,
                backupCount=LOG_FILE_BACKUPS,
                encoding="utf-8",
            )
        )
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def _drop_handlers(lg: logging.Logger) -> None:
    for handler in list(lg.handlers):
        lg.removeHandler(handler)
        handler.close()


def configure(
    *,
    level: _LevelT = "INFO",
    log_file: Optional[_PathT] = None,
    log_format: str = DEFAULT_FORMAT,
    replace_handlers: bool = True,
) -> logging.Logger:
    """Set the level and handlers of the ``MixedScout`` logger.

    With ``replace_handlers=False`` the new handlers are added next to the
    existing ones instead of replacing them.
    """
    lg = logging.getLogger(LOGGER_NAME)
    lg.setLevel(level)
    if replace_handlers:
        _drop_handlers(lg)
    for handler in _make_handlers(log_file, log_format):
        lg.addHandler(handler)
    lg.propagate = False
    return lg


def init_logging(
    level: _LevelT = "WARNING",
    log_file: Optional[_PathT] = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """Fresh console (and optional file) logging, as used by the CLI."""
    return configure(level=level, log_file=log_file, log_format=log_format)


logger: logging.Logger = init_logging()

__all__ = ["logger", "configure", "init_logging", "DEFAULT_FORMAT", "LOGGER_NAME"]
