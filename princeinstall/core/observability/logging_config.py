"""
Logging configuration — set up once by the CLI entrypoint.

Every module that does ``logger = logging.getLogger(__name__)``
inherits this config.

Levels are resolved in precedence order:
    CLI flag  >  PRINCE_LOG_LEVEL env var  >  WARNING (default)

Optional file output via PRINCE_LOG_FILE / PRINCE_LOG_FILE_LEVEL.
"""

from __future__ import annotations

import logging
import sys

# WARNING and above: the message only
_FMT_MINIMAL = "%(message)s"

# INFO: timestamp and logger name
_FMT_VERBOSE = "%(asctime)s [%(name)s] %(message)s"
_DATEFMT_VERBOSE = "%H:%M:%S"

# DEBUG and file output: level and file:line
_FMT_DETAILED = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d %(message)s"
_DATEFMT_DEBUG = "%H:%M:%S"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"

# Per-request chatter from the HTTP client stack
_NOISY_LOGGERS = ("httpx", "httpcore")

# Download progress lines. Shown on the console unless quiet, whatever
# the console level, and never propagated to the root handlers.
PROGRESS_LOGGER = "princeinstall.progress"
_FMT_PROGRESS = "-- %(message)s"


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
    quiet_third_party: bool = True,
    show_progress: bool = True,
) -> None:
    """Configure the root logger.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path to a log file.
        log_file_level: Level for the file; defaults to ``level``.
        quiet_third_party: Hold httpx/httpcore at WARNING unless ``level``
            is DEBUG.
        show_progress: Print ``PROGRESS_LOGGER`` records to stderr.
    """
    numeric_level = _parse_level(level)

    if numeric_level <= logging.DEBUG:
        fmt, datefmt = _FMT_DETAILED, _DATEFMT_DEBUG
    elif numeric_level <= logging.INFO:
        fmt, datefmt = _FMT_VERBOSE, _DATEFMT_VERBOSE
    else:
        fmt, datefmt = _FMT_MINIMAL, None

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(numeric_level)
    console.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)

    effective_level = numeric_level
    fh = None

    if log_file:
        file_level = _parse_level(log_file_level) if log_file_level else numeric_level
        effective_level = min(effective_level, file_level)

        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(_FMT_DETAILED, datefmt=_DATEFMT_FILE))
        root.addHandler(fh)

    root.setLevel(effective_level)

    if quiet_third_party and numeric_level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    _setup_progress(show_progress, fh)

    logging.raiseExceptions = False


def _parse_level(level: str | None) -> int:
    """Level name to numeric constant; unknown names mean WARNING."""
    if not level:
        return logging.WARNING
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return logging.WARNING
    return numeric


def _setup_progress(show: bool, file_handler: logging.Handler | None) -> None:
    """Give the progress logger its own handlers (console and/or file)."""
    progress = logging.getLogger(PROGRESS_LOGGER)
    progress.handlers.clear()
    progress.propagate = False
    progress.setLevel(logging.INFO)

    if show:
        console = logging.StreamHandler(sys.stderr)
        console.setFormatter(logging.Formatter(_FMT_PROGRESS))
        progress.addHandler(console)
    if file_handler is not None:
        progress.addHandler(file_handler)
    if not progress.handlers:
        progress.addHandler(logging.NullHandler())
