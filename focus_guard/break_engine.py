"""
Break suggestion decisions: natural-pause gating, snooze, cooldown and
escalation, plus handling of the presenter's take-break/snooze/dismiss reply.
"""

from __future__ import annotations

from typing import Optional

from PySide6.QtCore import QObject, Signal

from focus_guard import logger as app_logger
from focus_guard.activity_monitor import ActivityMonitor
from focus_guard.config import (
    NATURAL_PAUSE_SECONDS,
    SESSION_CLOSE_SECONDS,
    SNOOZE_SECONDS,
    SUGGESTION_COOLDOWN_SECONDS,
    EngineConfig,
)
from focus_guard.history import BreakHistory, BreakOutcome, BreakRecord
from focus_guard.models import SessionStats, Suggestion, whole_minutes
from focus_guard.session_tracker import FocusSessionTracker
from focus_guard.suggestion_copy import build_suggestion
from focus_guard.ticker import Clock, monotonic_clock

_LOGGER = app_logger.get_logger()

SUGGESTED_BREAK_KIND = "suggested"


class BreakSuggestionEngine(QObject):
    """
    Evaluated on a fixed tick. Each evaluation either emits one Suggestion
    through ``suggestionReady`` or leaves every field untouched.

    At most one suggestion is in flight; a newer one replaces it. The in-flight
    suggestion is dropped when its session ends and on ``shutdown``. Decisions
    arriving with nothing in flight are ignored.
    """

    suggestionReady = Signal(object)
    breakTaken = Signal(int, str)
    breakSnoozed = Signal(int)
    statsChanged = Signal(object)

    def __init__(
        self,
        config: EngineConfig,
        monitor: ActivityMonitor,
        tracker: FocusSessionTracker,
        *,
        clock: Clock = monotonic_clock,
        history: Optional[BreakHistory] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        self._config = config
        self._monitor = monitor
        self._tracker = tracker
        self._clock = clock
        self.history = history or BreakHistory()

        self._snoozed_until: float = float("-inf")
        self._last_suggestion_time: Optional[float] = None
        self._pending: Optional[Suggestion] = None
        self._shut_down = False

        tracker.sessionEnded.connect(self._on_session_ended)

    @property
    def config(self) -> EngineConfig:
        return self._config

    @property
    def snoozed_until(self) -> float:
        return self._snoozed_until

    @property
    def last_suggestion_time(self) -> Optional[float]:
        return self._last_suggestion_time

    @property
    def pending_suggestion(self) -> Optional[Suggestion]:
        return self._pending

    def evaluate(self) -> Optional[Suggestion]:
        """Run one evaluation tick."""
        if self._shut_down:
            return None
        now = self._clock()
        suggestion = self._decide(now)
        if suggestion is not None:
            self._last_suggestion_time = now
            self._present(suggestion)
        self.statsChanged.emit(self.get_stats())
        return suggestion

    def _decide(self, now: float) -> Optional[Suggestion]:
        if not self._config.enabled:
            return None

        session = self._tracker.current_session
        if session is None or not session.is_open:
            return None

        idle_seconds = self._monitor.time_since_last_activity()
        if idle_seconds < NATURAL_PAUSE_SECONDS:
            return None
        if idle_seconds >= SESSION_CLOSE_SECONDS:
            return None

        if now < self._snoozed_until:
            _LOGGER.debug("Suggestion suppressed; snoozed for another {:.0f}s.", self._snoozed_until - now)
            return None

        if (
            self._last_suggestion_time is not None
            and now - self._last_suggestion_time < SUGGESTION_COOLDOWN_SECONDS
        ):
            _LOGGER.debug("Suggestion suppressed by cooldown.")
            return None

        return build_suggestion(session.duration_minutes(now), self._config, now=now)

    def trigger_break_suggestion(self, minutes: float) -> Optional[Suggestion]:
        """
        Present the suggestion for an arbitrary focus duration, bypassing the
        pause, snooze and cooldown gates. Intended for tests and demos.
        """
        if self._shut_down:
            return None
        suggestion = build_suggestion(minutes, self._config, now=self._clock())
        if suggestion is not None:
            self._present(suggestion)
        return suggestion

    def _present(self, suggestion: Suggestion) -> None:
        self._pending = suggestion
        self.history.record(
            BreakRecord(
                outcome=BreakOutcome.SUGGESTED,
                focus_minutes=suggestion.focus_duration_minutes,
                intensity=suggestion.intensity_level,
                recorded_at=suggestion.created_at,
            )
        )
        _LOGGER.info(
            "Suggesting a {} break after {} minutes of focus.",
            suggestion.intensity_level.value,
            suggestion.focus_duration_minutes,
        )
        self.suggestionReady.emit(suggestion)

    def on_snooze(self) -> bool:
        suggestion = self._take_pending("snooze")
        if suggestion is None:
            return False
        now = self._clock()
        self._snoozed_until = now + SNOOZE_SECONDS
        self._record(suggestion, BreakOutcome.SNOOZED, now)
        _LOGGER.info("{} snoozed the break suggestion for 5 minutes.", self._config.user_name)
        self.breakSnoozed.emit(suggestion.focus_duration_minutes)
        self.statsChanged.emit(self.get_stats())
        return True

    def on_take_break(self, break_duration_minutes: Optional[float] = None) -> bool:
        suggestion = self._take_pending("take break")
        if suggestion is None:
            return False
        if break_duration_minutes is None or break_duration_minutes < 0:
            break_duration_minutes = suggestion.recommended_break_minutes
        now = self._clock()
        self._tracker.record_break(break_duration_minutes)
        self._record(suggestion, BreakOutcome.TAKEN, now, break_minutes=break_duration_minutes)
        _LOGGER.info(
            "{} took a suggested break after {} minutes.",
            self._config.user_name,
            suggestion.focus_duration_minutes,
        )
        self.breakTaken.emit(suggestion.focus_duration_minutes, SUGGESTED_BREAK_KIND)
        self.statsChanged.emit(self.get_stats())
        return True

    def on_dismiss(self) -> bool:
        suggestion = self._take_pending("dismiss")
        if suggestion is None:
            return False
        self._record(suggestion, BreakOutcome.DISMISSED, self._clock())
        _LOGGER.info("{} dismissed the break suggestion.", self._config.user_name)
        self.statsChanged.emit(self.get_stats())
        return True

    def _on_session_ended(self, _session) -> None:
        # A decision on a closed session must not reset the next one.
        if self._pending is not None:
            _LOGGER.debug("Session ended; discarding in-flight suggestion.")
        self._pending = None

    def _take_pending(self, decision: str) -> Optional[Suggestion]:
        if self._shut_down or self._pending is None:
            _LOGGER.debug("Ignoring '{}' decision with no suggestion in flight.", decision)
            return None
        suggestion, self._pending = self._pending, None
        return suggestion

    def _record(
        self,
        suggestion: Suggestion,
        outcome: BreakOutcome,
        now: float,
        *,
        break_minutes: Optional[float] = None,
    ) -> None:
        self.history.record(
            BreakRecord(
                outcome=outcome,
                focus_minutes=suggestion.focus_duration_minutes,
                intensity=suggestion.intensity_level,
                recorded_at=now,
                break_minutes=break_minutes,
            )
        )

    def get_stats(self) -> SessionStats:
        session = self._tracker.current_session
        is_active = self._monitor.is_active(NATURAL_PAUSE_SECONDS)
        if session is None or not session.is_open:
            return SessionStats(duration_minutes=0, is_active=is_active, breaks_taken=0)
        return SessionStats(
            duration_minutes=whole_minutes(session.duration_minutes(self._clock())),
            is_active=is_active,
            breaks_taken=session.breaks_taken,
            total_break_minutes=session.total_break_time,
        )

    def shutdown(self) -> None:
        """Invalidate any in-flight suggestion and refuse further work."""
        if self._pending is not None:
            _LOGGER.debug("Discarding in-flight suggestion on shutdown.")
        self._pending = None
        self._shut_down = True

    def resume(self) -> None:
        """Accept evaluations and decisions again after ``shutdown``."""
        self._shut_down = False
