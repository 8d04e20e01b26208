"""
MAPFOLIO Logging Utilities - Session Logging for Project Loads and Edits

Overview:
---------
Centralised logging configuration for MAPFOLIO.  Provides session-based file
logging with unique identifiers, configurable verbosity, and structured
output for following a project load stage by stage and for auditing every
feature-set write-back triggered by a layer edit.

Log Location:
-------------
- Default: ~/.mapfolio/logs/ (``MapfolioConfig.log_dir``)
- Each session creates a timestamped log file with session ID
- A symlink 'mapfolio.log' always points to the latest session
- Can be overridden via MAPFOLIO_LOG_DIR environment variable

Log Levels:
-----------
- DEBUG: Per-file reads, reference substitutions, serialized payload sizes
- INFO: Stage boundaries, loaded assets, edit write-backs
- WARNING: Soft-miss references, duplicate asset names, overwritten files
- ERROR: Load aborts, failed write-backs

Usage:
------
    from mapfolio.utils.logging import get_logger, setup_logging

    log_file = setup_logging(level="DEBUG")
    logger = get_logger(__name__)
    logger.info("Connecting project...")
"""

from __future__ import annotations

import logging
import os
import sys
import uuid
from datetime import datetime
from pathlib import Path
from typing import Optional

# ============================================================================
# Constants
# ============================================================================

DEFAULT_LOG_LEVEL = "INFO"
SYMLINK_NAME = "mapfolio.log"

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(session_id)s | %(name)s | %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

FILE_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(session_id)s | %(name)s:%(lineno)d | %(message)s"

_logging_initialised = False
_log_file_path: Optional[Path] = None
_session_id: Optional[str] = None


# ============================================================================
# Session ID Filter - Adds session_id to all log records
# ============================================================================

class SessionIdFilter(logging.Filter):
    """Add session_id to all log records."""

    def __init__(self, session_id: str):
        super().__init__()
        self.session_id = session_id

    def filter(self, record: logging.LogRecord) -> bool:
        record.session_id = self.session_id  # type: ignore[attr-defined]
        return True


class SessionFormatter(logging.Formatter):
    """Formatter that adds session_id, defaulting to 'N/A' if not present."""

    def format(self, record: logging.LogRecord) -> str:
        if not hasattr(record, "session_id"):
            record.session_id = _session_id or "N/A"  # type: ignore[attr-defined]
        return super().format(record)


# ============================================================================
# Setup Functions
# ============================================================================

def generate_session_id() -> str:
    """Generate a short unique session ID (6 characters)."""
    return uuid.uuid4().hex[:6]


def get_log_directory() -> Path:
    """Get the log directory, respecting MAPFOLIO_LOG_DIR environment variable."""
    env_log_dir = os.getenv("MAPFOLIO_LOG_DIR")
    if env_log_dir:
        return Path(env_log_dir)
    from mapfolio.config import get_config

    return get_config().log_dir


def generate_log_filename(session_id: str) -> str:
    """Generate a timestamped log filename with session ID."""
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return f"mapfolio_{timestamp}_{session_id}.log"


def setup_logging(
    level: Optional[str] = None,
    log_dir: Optional[Path] = None,
    console_output: bool = False,
    quiet: bool = False,
) -> Path:
    """
    Initialise MAPFOLIO logging with session-based file and optional console output.

    Each call starts a new session with its own log file and repoints the
    'mapfolio.log' symlink at it.

    Parameters
    ----------
    level : str, optional
        Log level: DEBUG, INFO, WARNING, ERROR. Defaults to INFO.
        Can also be set via MAPFOLIO_LOG_LEVEL environment variable.
    log_dir : Path, optional
        Directory for log files. Defaults to ~/.mapfolio/logs/
    console_output : bool
        If True, also log to console (stderr). Default False.
    quiet : bool
        If True, suppress console output entirely. Default False.

    Returns
    -------
    Path
        Path to the log file being written to.
    """
    global _logging_initialised, _log_file_path, _session_id

    _session_id = generate_session_id()

    if level is None:
        level = os.getenv("MAPFOLIO_LOG_LEVEL", DEFAULT_LOG_LEVEL)
    log_level = getattr(logging, level.upper(), logging.INFO)

    if log_dir is None:
        log_dir = get_log_directory()
    log_dir.mkdir(parents=True, exist_ok=True)

    log_file = log_dir / generate_log_filename(_session_id)
    _log_file_path = log_file

    mapfolio_logger = logging.getLogger("mapfolio")

    # Close handlers from a previous session before replacing them
    for handler in mapfolio_logger.handlers[:]:
        handler.close()
        mapfolio_logger.removeHandler(handler)
    for f in mapfolio_logger.filters[:]:
        mapfolio_logger.removeFilter(f)

    mapfolio_logger.setLevel(log_level)
    session_filter = SessionIdFilter(_session_id)

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(log_level)
    file_handler.addFilter(session_filter)
    file_handler.setFormatter(SessionFormatter(FILE_LOG_FORMAT, LOG_DATE_FORMAT))
    mapfolio_logger.addHandler(file_handler)

    if console_output and not quiet:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(log_level)
        console_handler.addFilter(session_filter)
        console_handler.setFormatter(SessionFormatter(LOG_FORMAT, LOG_DATE_FORMAT))
        mapfolio_logger.addHandler(console_handler)

    # Prevent propagation to root logger (avoid duplicate logs)
    mapfolio_logger.propagate = False

    symlink_path = log_dir / SYMLINK_NAME
    try:
        if symlink_path.is_symlink() or symlink_path.exists():
            symlink_path.unlink()
        symlink_path.symlink_to(log_file.name)
    except OSError:
        # Symlink creation may fail on some systems (e.g., Windows without admin)
        pass

    _logging_initialised = True

    mapfolio_logger.info("=" * 80)
    mapfolio_logger.info("MAPFOLIO Logging Session Started")
    mapfolio_logger.info(f"  Session ID: {_session_id}")
    mapfolio_logger.info(f"  Log file: {log_file}")
    mapfolio_logger.info(f"  Log level: {level.upper()}")
    mapfolio_logger.info("=" * 80)

    return log_file


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for the given module name.

    Parameters
    ----------
    name : str
        Module name (typically __name__)

    Returns
    -------
    logging.Logger
        Logger instance under the ``mapfolio`` namespace
    """
    if not _logging_initialised:
        setup_logging()

    if name.startswith("mapfolio"):
        return logging.getLogger(name)
    return logging.getLogger(f"mapfolio.{name}")


def get_current_log_file() -> Optional[Path]:
    """Return the path to the current log file, if logging is initialised."""
    return _log_file_path


def get_session_id() -> Optional[str]:
    """Return the current session ID, if logging is initialised."""
    return _session_id


# ============================================================================
# Logging Helper Functions - Structured Logging
# ============================================================================

def log_stage_start(logger: logging.Logger, stage: str, directory: str) -> None:
    """Log the start of a load stage."""
    logger.info("-" * 60)
    logger.info(f"STAGE START: {stage}")
    logger.info(f"  Directory: {directory}")


def log_stage_complete(logger: logging.Logger, stage: str, count: int) -> None:
    """Log the end of a load stage."""
    logger.info(f"STAGE COMPLETE: {stage} ({count} asset{'s' if count != 1 else ''})")
    logger.info("-" * 60)


def log_asset_loaded(
    logger: logging.Logger,
    kind: str,
    name: str,
    details: Optional[str] = None,
) -> None:
    """Log a successfully loaded asset."""
    msg = f"✓ {kind} loaded: {name}"
    if details:
        msg += f" | {details}"
    logger.info(msg)


def log_soft_miss(
    logger: logging.Logger,
    layer_name: str,
    kind: str,
    reference: str,
) -> None:
    """Log a layer reference that did not resolve (tolerated)."""
    logger.warning(f"Layer {layer_name}: {kind} {reference!r} not found, continuing without it")


def log_edit_sync(
    logger: logging.Logger,
    layer_name: str,
    file_name: str,
    feature_count: int,
    byte_count: int,
) -> None:
    """Log a feature-set write-back triggered by a layer edit."""
    logger.info(
        f"EDIT SYNC {layer_name} -> {file_name}: "
        f"{feature_count} feature(s), {byte_count} bytes"
    )
