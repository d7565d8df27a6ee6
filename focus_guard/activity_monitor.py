"""
Passive recorder of the most recent user input.
"""

from __future__ import annotations

import math
from typing import Callable, List, Optional

from focus_guard.event_source import ActivityKind
from focus_guard.ticker import Clock, monotonic_clock


class ActivityMonitor:
    """
    Keeps a single ``last_activity_time`` refreshed by every activity pulse.

    ``record_activity`` is called from the host's input dispatch at very high
    frequency; it only stores a float and notifies the activity listeners.
    Blur is relayed to blur listeners without touching the timestamp.
    """

    def __init__(self, clock: Clock = monotonic_clock) -> None:
        self._clock = clock
        self._last_activity_time: Optional[float] = None
        self._activity_listeners: List[Callable[[float], None]] = []
        self._blur_listeners: List[Callable[[], None]] = []

    @property
    def last_activity_time(self) -> Optional[float]:
        return self._last_activity_time

    def add_activity_listener(self, listener: Callable[[float], None]) -> None:
        self._activity_listeners.append(listener)

    def add_blur_listener(self, listener: Callable[[], None]) -> None:
        self._blur_listeners.append(listener)

    def clear_listeners(self) -> None:
        self._activity_listeners.clear()
        self._blur_listeners.clear()

    def record_activity(self, kind: ActivityKind = ActivityKind.KEYSTROKE) -> None:
        now = self._clock()
        self._last_activity_time = now
        for listener in self._activity_listeners:
            listener(now)

    def record_blur(self) -> None:
        for listener in self._blur_listeners:
            listener()

    def time_since_last_activity(self) -> float:
        """Seconds since the last pulse; infinite before the first one."""
        if self._last_activity_time is None:
            return math.inf
        return max(0.0, self._clock() - self._last_activity_time)

    def is_active(self, grace_seconds: float) -> bool:
        return self.time_since_last_activity() < grace_seconds
