"""
Focus session lifecycle: Idle until the first activity pulse, Active until a
long inactivity gap or a window blur.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from PySide6.QtCore import QObject, Signal

from focus_guard import logger as app_logger
from focus_guard.activity_monitor import ActivityMonitor
from focus_guard.config import SESSION_CLOSE_SECONDS
from focus_guard.models import FocusSession
from focus_guard.ticker import Clock, monotonic_clock

_LOGGER = app_logger.get_logger()


class TrackerState(Enum):
    IDLE = "Idle"
    ACTIVE = "Active"


class FocusSessionTracker(QObject):
    """
    Owns the single active FocusSession slot.

    A session is only ever created from Idle, so two open sessions cannot
    coexist. ``poll`` must be driven once per second by the host ticker.
    """

    sessionStarted = Signal(object)
    sessionEnded = Signal(object)

    def __init__(
        self,
        monitor: ActivityMonitor,
        *,
        clock: Clock = monotonic_clock,
        close_after_seconds: float = SESSION_CLOSE_SECONDS,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._monitor = monitor
        self._clock = clock
        self._close_after_seconds = close_after_seconds
        self._session: Optional[FocusSession] = None
        self._last_closed: Optional[FocusSession] = None

        monitor.add_activity_listener(self._on_activity)
        monitor.add_blur_listener(self._on_blur)

    @property
    def state(self) -> TrackerState:
        return TrackerState.IDLE if self._session is None else TrackerState.ACTIVE

    @property
    def current_session(self) -> Optional[FocusSession]:
        return self._session

    @property
    def last_closed_session(self) -> Optional[FocusSession]:
        return self._last_closed

    def poll(self) -> None:
        if self._session is None:
            return
        if self._monitor.time_since_last_activity() >= self._close_after_seconds:
            self.close_session("inactivity")

    def close_session(self, reason: str) -> Optional[FocusSession]:
        session = self._session
        if session is None:
            return None
        session.close(self._clock())
        self._session = None
        self._last_closed = session
        _LOGGER.info(
            "Focus session closed after {:.1f} minutes ({}); breaks taken: {}.",
            session.duration_minutes(session.end_time),
            reason,
            session.breaks_taken,
        )
        self.sessionEnded.emit(session)
        return session

    def record_break(self, break_minutes: float) -> Optional[FocusSession]:
        """Restart the session clock after an accepted break, keeping its counters."""
        session = self._session
        if session is None:
            _LOGGER.debug("Break recorded with no active session; ignoring.")
            return None
        session.restart_after_break(self._clock(), break_minutes)
        _LOGGER.info(
            "Break accepted ({} min); session clock restarted. Breaks taken: {}.",
            break_minutes,
            session.breaks_taken,
        )
        return session

    def _on_activity(self, now: float) -> None:
        if self._session is not None:
            return
        self._session = FocusSession(start_time=now)
        _LOGGER.info("Focus session started.")
        self.sessionStarted.emit(self._session)

    def _on_blur(self) -> None:
        if self._session is None:
            return
        self.close_session("window blur")
