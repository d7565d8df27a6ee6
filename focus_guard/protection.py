"""
Host-facing facade wiring the activity monitor, session tracker and break
engine to an event source and two tickers.
"""

from __future__ import annotations

from typing import Optional

from PySide6.QtCore import QObject

from focus_guard import logger as app_logger
from focus_guard.activity_monitor import ActivityMonitor
from focus_guard.break_engine import BreakSuggestionEngine
from focus_guard.config import EVALUATION_TICK_SECONDS, TRACKER_POLL_SECONDS, EngineConfig
from focus_guard.event_source import ActivityEventSource, QtActivityEventSource
from focus_guard.history import BreakHistory
from focus_guard.models import FocusSession, SessionStats, Suggestion
from focus_guard.session_tracker import FocusSessionTracker
from focus_guard.ticker import Clock, TickerFactory, monotonic_clock, qt_ticker_factory

_LOGGER = app_logger.get_logger()


class HyperfocusProtection(QObject):
    """
    One user's protection engine.

    All state lives on the instance, so several users can be served side by
    side by creating one instance each. Presenters connect to
    ``suggestionReady`` and answer through ``on_snooze``, ``on_take_break`` or
    ``on_dismiss``.
    """

    def __init__(
        self,
        config: EngineConfig,
        *,
        event_source: Optional[ActivityEventSource] = None,
        clock: Clock = monotonic_clock,
        ticker_factory: TickerFactory = qt_ticker_factory,
        history: Optional[BreakHistory] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._config = config.sanitized()
        self._clock = clock
        self._event_source = event_source or QtActivityEventSource()

        self.monitor = ActivityMonitor(clock)
        self.tracker = FocusSessionTracker(self.monitor, clock=clock, parent=self)
        self.engine = BreakSuggestionEngine(
            self._config,
            self.monitor,
            self.tracker,
            clock=clock,
            history=history,
            parent=self,
        )

        self._poll_ticker = ticker_factory(TRACKER_POLL_SECONDS, self.tracker.poll)
        self._evaluation_ticker = ticker_factory(EVALUATION_TICK_SECONDS, self.engine.evaluate)
        self._running = False

    @property
    def config(self) -> EngineConfig:
        return self._config

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def history(self) -> BreakHistory:
        return self.engine.history

    @property
    def suggestionReady(self):  # noqa: N802
        return self.engine.suggestionReady

    @property
    def breakTaken(self):  # noqa: N802
        return self.engine.breakTaken

    @property
    def breakSnoozed(self):  # noqa: N802
        return self.engine.breakSnoozed

    @property
    def statsChanged(self):  # noqa: N802
        return self.engine.statsChanged

    def start(self) -> None:
        if self._running:
            return
        if not self._config.enabled:
            _LOGGER.info("Hyperfocus protection disabled; not observing activity.")
            return
        _LOGGER.info(
            "Starting hyperfocus protection (first break at {} min, max intensity {}).",
            self._config.first_break_threshold_minutes,
            self._config.max_intensity.value,
        )
        self.engine.resume()
        self._event_source.subscribe(self.monitor.record_activity, self.monitor.record_blur)
        self._poll_ticker.start()
        self._evaluation_ticker.start()
        self._running = True

    def shutdown(self) -> None:
        if not self._running:
            self.engine.shutdown()
            return
        _LOGGER.info("Stopping hyperfocus protection.")
        self._running = False
        self._poll_ticker.stop()
        self._evaluation_ticker.stop()
        self._event_source.unsubscribe(self.monitor.record_activity, self.monitor.record_blur)
        self.engine.shutdown()
        self.tracker.close_session("shutdown")

    def on_snooze(self) -> bool:
        return self.engine.on_snooze()

    def on_take_break(self, break_duration_minutes: Optional[float] = None) -> bool:
        return self.engine.on_take_break(break_duration_minutes)

    def on_dismiss(self) -> bool:
        return self.engine.on_dismiss()

    def get_stats(self) -> SessionStats:
        return self.engine.get_stats()

    @property
    def current_session(self) -> Optional[FocusSession]:
        return self.tracker.current_session

    def current_duration_minutes(self) -> int:
        return self.get_stats().duration_minutes

    def trigger_break_suggestion(self, minutes: float) -> Optional[Suggestion]:
        """Debug hook: present the suggestion for ``minutes`` of focus right away."""
        return self.engine.trigger_break_suggestion(minutes)

    def end_session(self) -> Optional[FocusSession]:
        """Debug hook: close the active session as if the user left."""
        return self.tracker.close_session("ended by host")

    def encouragement_message(self) -> str:
        return self.history.encouragement_message()
