"""
Logging Configuration
Sets up the process-wide logger for the 'cadpipe' namespace.

Initialization is idempotent: calling init_logger() again, or calling it
after the host application attached its own handlers to the 'cadpipe'
logger, does nothing.
"""

import logging
import os
import threading
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from cadpipe.errors import LoggerSetupFailed

LOGGER_NAME = "cadpipe"
LOG_LEVEL_ENV = "CADPIPE_LOG"
DEFAULT_LOG_LEVEL = "WARNING"

_lock = threading.Lock()
_initialized = False


def _level_from_env(value: Optional[str]) -> int:
    name = (value or DEFAULT_LOG_LEVEL).strip().upper()
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level {value!r} in ${LOG_LEVEL_ENV}")
    return level


def init_logger() -> None:
    """
    Initialize logging, if not already done.

    The level is read from the CADPIPE_LOG environment variable
    (e.g. ``debug``, ``info``); it defaults to ``warning``.

    Raises:
        LoggerSetupFailed: If the logger cannot be configured, e.g. because
            CADPIPE_LOG names an unknown level
    """
    global _initialized

    with _lock:
        if _initialized:
            return

        logger = logging.getLogger(LOGGER_NAME)
        if logger.handlers:
            # Configured by the host application
            _initialized = True
            return

        try:
            level = _level_from_env(os.environ.get(LOG_LEVEL_ENV))
            handler = RichHandler(
                console=Console(stderr=True),
                show_path=False,
                rich_tracebacks=True,
            )
            handler.setFormatter(logging.Formatter("%(message)s", datefmt="%H:%M:%S"))
        except Exception as e:
            raise LoggerSetupFailed() from e

        logger.setLevel(level)
        logger.addHandler(handler)
        _initialized = True

    logger.debug("Logging initialized.")


def is_initialized() -> bool:
    return _initialized


def reset_logger() -> None:
    """Remove the handlers installed by init_logger(). Intended for tests."""
    global _initialized

    with _lock:
        logger = logging.getLogger(LOGGER_NAME)
        for handler in list(logger.handlers):
            if isinstance(handler, RichHandler):
                logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)
        _initialized = False
