"""
Logging configuration — central setup for the CLI entrypoint.

Called once at startup by main.py. Every module that does
``logger = logging.getLogger(__name__)`` inherits this config.

The console handler writes to stdout: the progress lines *are* the
program's output. The file handler appends to the persistent install
log, so successive runs accumulate one audit trail.

Levels are resolved in precedence order:
    CLI flag  >  DEVBOOTSTRAP_LOG_LEVEL env var  >  INFO (default)

The file level defaults to DEBUG (DEVBOOTSTRAP_LOG_FILE_LEVEL overrides),
so captured command output always lands in the log even when the
console is quiet.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

# ── Format strings ──────────────────────────────────────────────

# INFO and above on the console — the message is the output
_FMT_MINIMAL = "%(message)s"

# DEBUG console and file output — full diagnostic with file:line
_FMT_FULL = "%(asctime)s %(levelname)-5s %(name)s:%(lineno)d — %(message)s"
_DATEFMT_DEBUG = "%H:%M:%S"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that are noisy at INFO/DEBUG
_NOISY_LOGGERS = ("urllib3", "charset_normalizer")

logger = logging.getLogger(__name__)


def setup_logging(
    level: str = "INFO",
    log_file: str | Path | None = None,
    log_file_level: str | None = None,
    quiet_third_party: bool = True,
) -> Path | None:
    """Configure Python logging for the entire process.

    Args:
        level: Console log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional path to the persistent log file (appended to).
        log_file_level: Optional separate level for the log file.
            Defaults to DEBUG.
        quiet_third_party: If True, keep noisy third-party loggers at WARNING
            unless we're at DEBUG level.

    Returns:
        The log file path actually in use, or None when logging is
        console-only (no file requested, or the file is unwritable).
    """
    numeric_level = _parse_level(level, default=logging.INFO)

    # ── Console handler (stdout) ────────────────────────────────
    if numeric_level <= logging.DEBUG:
        fmt, datefmt = _FMT_FULL, _DATEFMT_DEBUG
    else:
        fmt, datefmt = _FMT_MINIMAL, None

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(numeric_level)
    console.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    # ── Root logger ─────────────────────────────────────────────
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    root.addHandler(console)

    effective_level = numeric_level
    active_file: Path | None = None

    # ── File handler (optional) ─────────────────────────────────
    if log_file:
        file_level = _parse_level(log_file_level, default=logging.DEBUG)
        path = Path(log_file)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            fh = logging.FileHandler(path, mode="a", encoding="utf-8")
        except OSError as e:
            # Degrade to console-only; warn once.
            root.setLevel(effective_level)
            logger.warning("Cannot write log file %s (%s) — logging to stdout only", path, e)
        else:
            fh.setLevel(file_level)
            fh.setFormatter(logging.Formatter(_FMT_FULL, datefmt=_DATEFMT_FILE))
            root.addHandler(fh)
            effective_level = min(effective_level, file_level)
            active_file = path

    root.setLevel(effective_level)

    # ── Third-party noise control ───────────────────────────────
    if quiet_third_party and numeric_level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    # Don't propagate exceptions from logging itself
    logging.raiseExceptions = False

    return active_file


def _parse_level(level: str | None, default: int = logging.INFO) -> int:
    """Convert a level name string to its numeric constant."""
    if not level:
        return default
    numeric = getattr(logging, level.upper(), None)
    if not isinstance(numeric, int):
        return default
    return numeric
