"""
Logging setup for Focus Guard.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Optional

from loguru import logger as _logger

_LOG_INITIALISED = False
APP_HOME = Path(os.environ.get("FOCUS_GUARD_HOME", str(Path.home() / ".focus_guard")))
DEFAULT_LOG_PATH = APP_HOME / "logs" / "focus_guard.log"


def configure(log_path: Optional[Path] = None) -> None:
    """
    Configure loguru for the application.

    Runs once per process; later calls are ignored.
    """
    global _LOG_INITIALISED
    if _LOG_INITIALISED:
        return
    target = log_path or DEFAULT_LOG_PATH

    _logger.remove()
    if sys.stderr is not None:
        _logger.add(sys.stderr, level="INFO", enqueue=True)
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        # Console-only logging when the data directory is not writable.
        _logger.warning("Cannot create log directory {}: {}", target.parent, exc)
    else:
        _logger.add(
            target,
            level="DEBUG",
            rotation="10 MB",
            retention=5,
            encoding="utf-8",
            enqueue=True,
            backtrace=True,
            diagnose=False,
        )
    _LOG_INITIALISED = True


def get_logger():
    """Return the shared logger instance."""
    configure()
    return _logger
