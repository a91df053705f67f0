"""
Logging setup and exception types shared by the vector3 package.

The package logger stays silent until an application attaches handlers,
either on its own or through :func:`config_logging` /
:func:`set_up_simple_logging`.
"""

from __future__ import annotations

import logging
import warnings
from pathlib import Path
from shutil import move
from typing import List, Optional

LOGGER_ID = "vector3"
LOG_FORMAT = "%(asctime)-24s|%(levelname)-9s|%(name)-20s|%(message)s"
vector3_logger = logging.getLogger(LOGGER_ID)
vector3_logger.addHandler(logging.NullHandler())
module_logger = logging.getLogger(f"{LOGGER_ID}.logging")
vector3_handlers: List[logging.Handler] = []


class Vector3Error(Exception):
    """Base class for errors raised by vector3."""
    pass


class Vector3ValueError(Vector3Error, ValueError):
    """Malformed input: bad construction data, matrices or settings."""
    pass


class DegenerateAxisError(Vector3ValueError):
    """A projection-based operation was given a zero-length reference axis."""
    pass


def config_logging(
    handlers: List[logging.Handler],
    replace: bool = True,
    level: int = logging.DEBUG,
    redirect_warnings: bool = True,
) -> None:
    """Configure logging for the vector3 package.

    Args:
        handlers: List of already configured ``logging.Handler`` objects
        replace: Whether to replace handlers installed by a previous call or add to them
        level: Log level of the vector3 logger. Defaults to ``logging.DEBUG``.
        redirect_warnings: Whether to redirect warnings to the logger. This modifies the warnings settings.
    """
    global vector3_handlers
    root_logger = logging.getLogger()
    if replace and vector3_handlers:
        for h in vector3_handlers:
            root_logger.removeHandler(h)
    for h in handlers:
        root_logger.addHandler(h)
    vector3_handlers = list(handlers) if replace else vector3_handlers + list(handlers)

    vector3_logger.setLevel(level)

    if redirect_warnings:
        logging.captureWarnings(True)
        warn_log = logging.getLogger("py.warnings")
        warnings.simplefilter("once")
        for h in handlers:
            warn_log.addHandler(h)
    vector3_logger.info("Started vector3 logging.")
    for h in handlers:
        if isinstance(h, logging.FileHandler):
            module_logger.info(f"Logging to file: {h.baseFilename}.")


def set_up_simple_logging(
    log_file: Optional[str] = None,
    redirect_warnings: bool = True,
    level: int = logging.INFO,
) -> None:
    """Log to ``sys.stderr`` and optionally to a file.

    Existing log files are moved to ``<log_file>.1``. For finer control
    use :func:`config_logging` directly.

    Args:
        log_file: Log filename, optional
        redirect_warnings: Whether to redirect warnings to the logger
        level: Log level of the created handlers. Defaults to ``logging.INFO``.
    """
    sh = logging.StreamHandler()
    sh.setLevel(level)
    sh.setFormatter(logging.Formatter(LOG_FORMAT))
    handlers: List[logging.Handler] = [sh]
    moved_log = False
    fh = None
    if log_file:
        if Path(log_file).exists():
            move(log_file, f"{log_file}.1")
            moved_log = True
        fh = logging.FileHandler(log_file, "w", "utf-8")
        fh.setFormatter(logging.Formatter(LOG_FORMAT))
        fh.setLevel(level)
        handlers.append(fh)
    config_logging(handlers, level=level, redirect_warnings=redirect_warnings)
    if moved_log and fh is not None:
        module_logger.info(f"Moved old log file to '{fh.baseFilename}.1'.")
