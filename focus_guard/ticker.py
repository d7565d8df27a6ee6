"""
Fixed-period tick sources and clocks.

``QtTicker`` drives production code from the Qt event loop. ``VirtualClock``
hands out ``ManualTicker`` instances that fire only when the clock is advanced,
which lets tests step time deterministically.
"""

from __future__ import annotations

import itertools
import time
from abc import ABC, abstractmethod
from typing import Callable, List, Optional

from PySide6.QtCore import QObject, QTimer

from focus_guard import logger as app_logger

_LOGGER = app_logger.get_logger()

Clock = Callable[[], float]
TickCallback = Callable[[], None]
TickerFactory = Callable[[float, TickCallback], "Ticker"]


def monotonic_clock() -> float:
    return time.monotonic()


class Ticker(ABC):
    """Invokes a callback every ``interval_seconds`` between start() and stop()."""

    def __init__(self, interval_seconds: float, callback: TickCallback) -> None:
        if interval_seconds <= 0:
            raise ValueError("Ticker interval must be positive.")
        self.interval_seconds = interval_seconds
        self._callback = callback

    @abstractmethod
    def start(self) -> None:
        pass

    @abstractmethod
    def stop(self) -> None:
        pass

    @property
    @abstractmethod
    def is_active(self) -> bool:
        pass


class QtTicker(Ticker):
    """
    QTimer-backed ticker.

    The timer is single-shot and re-armed only after the callback returns, so a
    slow callback never overlaps the next tick of the same ticker.
    """

    def __init__(
        self,
        interval_seconds: float,
        callback: TickCallback,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(interval_seconds, callback)
        self._active = False
        self._timer = QTimer(parent)
        self._timer.setSingleShot(True)
        self._timer.setInterval(int(interval_seconds * 1000))
        self._timer.timeout.connect(self._on_timeout)  # type: ignore[arg-type]

    def start(self) -> None:
        if self._active:
            return
        self._active = True
        self._timer.start()

    def stop(self) -> None:
        if not self._active:
            return
        self._active = False
        self._timer.stop()

    @property
    def is_active(self) -> bool:
        return self._active

    def _on_timeout(self) -> None:
        if not self._active:
            return
        try:
            self._callback()
        except Exception:  # noqa: BLE001
            _LOGGER.exception("Tick callback raised; continuing with the next tick.")
        finally:
            if self._active:
                self._timer.start()


def qt_ticker_factory(interval_seconds: float, callback: TickCallback) -> Ticker:
    return QtTicker(interval_seconds, callback)


class ManualTicker(Ticker):
    """Ticker owned by a VirtualClock; fires only while the clock advances."""

    def __init__(self, clock: "VirtualClock", interval_seconds: float, callback: TickCallback, order: int) -> None:
        super().__init__(interval_seconds, callback)
        self._clock = clock
        self._order = order
        self.next_due: Optional[float] = None
        self.fire_count = 0

    def start(self) -> None:
        if self.next_due is not None:
            return
        self.next_due = self._clock.now() + self.interval_seconds

    def stop(self) -> None:
        self.next_due = None

    @property
    def is_active(self) -> bool:
        return self.next_due is not None

    def sort_key(self):
        return (self.next_due, self._order)

    def fire(self) -> None:
        self.fire_count += 1
        self._callback()
        if self.next_due is not None:
            self.next_due += self.interval_seconds


class VirtualClock:
    """
    Deterministic clock for tests and simulations.

    Calling the instance returns the current time in seconds, so it can be
    passed anywhere a ``Clock`` is expected.
    """

    def __init__(self, start: float = 0.0) -> None:
        self._now = start
        self._tickers: List[ManualTicker] = []
        self._sequence = itertools.count()

    def __call__(self) -> float:
        return self._now

    def now(self) -> float:
        return self._now

    def create_ticker(self, interval_seconds: float, callback: TickCallback) -> ManualTicker:
        ticker = ManualTicker(self, interval_seconds, callback, next(self._sequence))
        self._tickers.append(ticker)
        return ticker

    def advance(self, seconds: float) -> None:
        """Move time forward, firing every due tick in chronological order."""
        if seconds < 0:
            raise ValueError("Cannot move a virtual clock backwards.")
        target = self._now + seconds
        while True:
            due = [t for t in self._tickers if t.next_due is not None and t.next_due <= target]
            if not due:
                break
            ticker = min(due, key=ManualTicker.sort_key)
            self._now = max(self._now, ticker.next_due)
            ticker.fire()
        self._now = target

    def advance_minutes(self, minutes: float) -> None:
        self.advance(minutes * 60.0)
