"""
Sources of activity pulses and window focus/blur signals.

The engine only depends on ``ActivityEventSource``. Hosts pick a concrete
source: in-process Qt input events, system-wide idle polling on Windows, or
the simulated source used by tests and demos.
"""

from __future__ import annotations

import ctypes
import sys
from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, List, Optional

from PySide6.QtCore import QCoreApplication, QEvent, QObject, Qt
from PySide6.QtGui import QGuiApplication

from focus_guard import logger as app_logger
from focus_guard.ticker import TickerFactory, qt_ticker_factory

_LOGGER = app_logger.get_logger()


class ActivityKind(Enum):
    KEYSTROKE = "keystroke"
    CLICK = "click"
    POINTER_MOVE = "pointer_move"
    SCROLL = "scroll"
    TOUCH = "touch"
    WINDOW_FOCUS = "window_focus"
    SYSTEM_INPUT = "system_input"


ActivityListener = Callable[[ActivityKind], None]
BlurListener = Callable[[], None]


class ActivityEventSource(ABC):
    """
    Fan-out of host input events to subscribed listeners.

    Listener faults are logged and swallowed so they never reach the host's
    event dispatch.
    """

    def __init__(self) -> None:
        self._activity_listeners: List[ActivityListener] = []
        self._blur_listeners: List[BlurListener] = []
        self._attached = False

    def subscribe(self, on_activity: ActivityListener, on_blur: Optional[BlurListener] = None) -> None:
        if on_activity not in self._activity_listeners:
            self._activity_listeners.append(on_activity)
        if on_blur is not None and on_blur not in self._blur_listeners:
            self._blur_listeners.append(on_blur)
        if not self._attached:
            self._attached = True
            self.attach()

    def unsubscribe(self, on_activity: ActivityListener, on_blur: Optional[BlurListener] = None) -> None:
        if on_activity in self._activity_listeners:
            self._activity_listeners.remove(on_activity)
        if on_blur is not None and on_blur in self._blur_listeners:
            self._blur_listeners.remove(on_blur)
        if self._attached and not self._activity_listeners and not self._blur_listeners:
            self._attached = False
            self.detach()

    @property
    def is_attached(self) -> bool:
        return self._attached

    @abstractmethod
    def attach(self) -> None:
        """Start receiving events from the host."""

    @abstractmethod
    def detach(self) -> None:
        """Stop receiving events from the host."""

    def _dispatch_activity(self, kind: ActivityKind) -> None:
        for listener in self._activity_listeners:
            try:
                listener(kind)
            except Exception:  # noqa: BLE001
                _LOGGER.opt(exception=True).warning("Activity listener failed for {} event.", kind.value)

    def _dispatch_blur(self) -> None:
        for listener in self._blur_listeners:
            try:
                listener()
            except Exception:  # noqa: BLE001
                _LOGGER.opt(exception=True).warning("Blur listener failed.")


class SimulatedEventSource(ActivityEventSource):
    """Event source driven by explicit calls; used by tests and the demo harness."""

    def attach(self) -> None:
        pass

    def detach(self) -> None:
        pass

    def emit_activity(self, kind: ActivityKind = ActivityKind.KEYSTROKE) -> None:
        self._dispatch_activity(kind)

    def emit_focus(self) -> None:
        self._dispatch_activity(ActivityKind.WINDOW_FOCUS)

    def emit_blur(self) -> None:
        self._dispatch_blur()


_QT_EVENT_KINDS = {
    QEvent.Type.KeyPress: ActivityKind.KEYSTROKE,
    QEvent.Type.MouseButtonPress: ActivityKind.CLICK,
    QEvent.Type.MouseMove: ActivityKind.POINTER_MOVE,
    QEvent.Type.HoverMove: ActivityKind.POINTER_MOVE,
    QEvent.Type.Wheel: ActivityKind.SCROLL,
    QEvent.Type.TouchBegin: ActivityKind.TOUCH,
}


class _InputEventFilter(QObject):
    def __init__(self, source: "QtActivityEventSource") -> None:
        super().__init__()
        self._source = source

    def eventFilter(self, watched: QObject, event: QEvent) -> bool:  # noqa: N802
        kind = _QT_EVENT_KINDS.get(event.type())
        if kind is not None:
            self._source._dispatch_activity(kind)
        return False


class QtActivityEventSource(ActivityEventSource):
    """
    Observes input delivered to this Qt application and its active state.

    Only input sent to this application's own windows is seen. With
    ``close_on_blur`` False, losing the active state is not reported as blur.
    Hosts without a focused main window, such as tray apps, pass False.
    """

    def __init__(self, app: Optional[QCoreApplication] = None, *, close_on_blur: bool = True) -> None:
        super().__init__()
        self._app = app
        self._close_on_blur = close_on_blur
        self._filter = _InputEventFilter(self)

    def attach(self) -> None:
        app = self._app or QCoreApplication.instance()
        if app is None:
            _LOGGER.warning("No Qt application instance; input events will not be observed.")
            return
        self._app = app
        app.installEventFilter(self._filter)
        if isinstance(app, QGuiApplication):
            app.applicationStateChanged.connect(self._on_application_state_changed)

    def detach(self) -> None:
        if self._app is None:
            return
        self._app.removeEventFilter(self._filter)
        if isinstance(self._app, QGuiApplication):
            try:
                self._app.applicationStateChanged.disconnect(self._on_application_state_changed)
            except (RuntimeError, TypeError):
                pass

    def _on_application_state_changed(self, state: Qt.ApplicationState) -> None:
        if state == Qt.ApplicationState.ApplicationActive:
            self._dispatch_activity(ActivityKind.WINDOW_FOCUS)
        elif self._close_on_blur:
            self._dispatch_blur()


class SystemIdleEventSource(ActivityEventSource):
    """
    Polls the operating system's last-input time and turns fresh input into
    activity pulses. Covers input made in other applications, which Qt never
    sees.
    """

    def __init__(
        self,
        *,
        poll_interval_seconds: float = 1.0,
        ticker_factory: TickerFactory = qt_ticker_factory,
        idle_seconds_provider: Optional[Callable[[], float]] = None,
    ) -> None:
        super().__init__()
        self._poll_interval_seconds = poll_interval_seconds
        self._idle_seconds_provider = idle_seconds_provider or _system_idle_seconds
        self._ticker = ticker_factory(poll_interval_seconds, self._poll)

    def attach(self) -> None:
        self._ticker.start()

    def detach(self) -> None:
        self._ticker.stop()

    def set_idle_seconds_provider(self, provider: Callable[[], float]) -> None:
        """Override idle seconds acquisition. Primarily used for testing."""
        self._idle_seconds_provider = provider

    def _poll(self) -> None:
        try:
            idle_seconds = self._idle_seconds_provider()
        except OSError as exc:
            # If querying idle time fails, stop polling rather than crashing.
            _LOGGER.error("Unable to query system idle time: {}", exc)
            self._ticker.stop()
            return
        if idle_seconds < self._poll_interval_seconds:
            self._dispatch_activity(ActivityKind.SYSTEM_INPUT)


def system_idle_supported() -> bool:
    return sys.platform == "win32"


def _system_idle_seconds() -> float:
    if not system_idle_supported():
        raise OSError("System idle time is only available on Windows.")
    idle_ms = (_get_tick_count_ms() - _get_last_input_info()) & 0xFFFFFFFF
    return idle_ms / 1000.0


def _get_last_input_info() -> int:
    class LASTINPUTINFO(ctypes.Structure):
        _fields_ = [("cbSize", ctypes.c_uint), ("dwTime", ctypes.c_uint)]

    user32 = ctypes.windll.user32  # type: ignore[attr-defined]
    last_input = LASTINPUTINFO()
    last_input.cbSize = ctypes.sizeof(LASTINPUTINFO)

    if not user32.GetLastInputInfo(ctypes.byref(last_input)):
        raise ctypes.WinError()  # type: ignore[attr-defined]

    return last_input.dwTime


def _get_tick_count_ms() -> int:
    # GetLastInputInfo reports a 32-bit tick count, so compare against the same width.
    kernel32 = ctypes.windll.kernel32  # type: ignore[attr-defined]
    return int(kernel32.GetTickCount())
