"""
Entry point for the Focus Guard tray application.
"""

from __future__ import annotations

import sys
import time
from typing import Iterable, Tuple

from PySide6.QtCore import QLockFile
from PySide6.QtWidgets import QApplication

from focus_guard import logger as app_logger
from focus_guard.app import APP_NAME, AppCoordinator

_LOGGER = app_logger.get_logger()
_LOCK_PATH = app_logger.APP_HOME / "focus_guard.lock"


class _InstanceGuard:
    """Lock-file guard to prevent concurrent instances."""

    def __init__(self, path) -> None:
        self._path = path
        self._lock = None

    def acquire(self) -> bool:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
        except OSError:
            # If we cannot create the lock we silently allow the instance.
            return True
        lock = QLockFile(str(self._path))
        if not lock.tryLock(100):
            return False
        self._lock = lock
        return True

    def release(self) -> None:
        if self._lock is None:
            return
        self._lock.unlock()
        self._lock = None


def _run_application_once(argv: Iterable[str]) -> Tuple[int, bool]:
    """Start the Qt application once and report whether shutdown was intentional."""
    app = QApplication.instance() or QApplication(list(argv))
    app.setApplicationName(APP_NAME)
    app.setQuitOnLastWindowClosed(False)
    coordinator = AppCoordinator()
    coordinator.start()
    exit_code = app.exec()
    manual_shutdown = getattr(coordinator, "manual_shutdown_requested", False)
    return exit_code, bool(manual_shutdown)


def main() -> int:
    """Launch the application with single-instance + recovery safeguards."""
    guard = _InstanceGuard(_LOCK_PATH)
    if not guard.acquire():
        _LOGGER.debug("Focus Guard instance already running; exiting silently.")
        return 0

    backoff_seconds = 2
    max_backoff = 30

    try:
        while True:
            try:
                exit_code, manual = _run_application_once(sys.argv)
            except Exception:  # pragma: no cover - crash guard
                _LOGGER.exception("Focus Guard crashed; attempting automatic recovery.")
                exit_code = 1
                manual = False

            if manual:
                return exit_code

            _LOGGER.warning(
                "Focus Guard exited unexpectedly (code={}). Restarting in {} seconds.",
                exit_code,
                backoff_seconds,
            )
            time.sleep(backoff_seconds)
            backoff_seconds = min(backoff_seconds * 2, max_backoff)
    finally:
        guard.release()


if __name__ == "__main__":
    raise SystemExit(main())
