import pytest
from PySide6.QtCore import Qt

from focus_guard.config import EngineConfig
from focus_guard.event_source import (
    ActivityKind,
    QtActivityEventSource,
    SimulatedEventSource,
    SystemIdleEventSource,
)
from focus_guard.protection import HyperfocusProtection
from focus_guard.ticker import VirtualClock


def test_subscribe_attaches_and_unsubscribe_detaches():
    source = SimulatedEventSource()
    received = []

    source.subscribe(received.append)
    assert source.is_attached

    source.emit_activity(ActivityKind.SCROLL)
    source.unsubscribe(received.append)
    source.emit_activity(ActivityKind.SCROLL)

    assert received == [ActivityKind.SCROLL]
    assert not source.is_attached


def test_listener_faults_never_reach_the_dispatcher():
    source = SimulatedEventSource()
    received = []

    def broken(kind):
        raise RuntimeError("boom")

    source.subscribe(broken, on_blur=lambda: 1 / 0)
    source.subscribe(received.append)

    source.emit_activity(ActivityKind.TOUCH)
    source.emit_blur()

    assert received == [ActivityKind.TOUCH]


def test_focus_is_delivered_as_activity_and_blur_separately():
    source = SimulatedEventSource()
    activity, blurs = [], []
    source.subscribe(activity.append, on_blur=lambda: blurs.append(True))

    source.emit_focus()
    source.emit_blur()

    assert activity == [ActivityKind.WINDOW_FOCUS]
    assert blurs == [True]


def test_system_idle_source_turns_fresh_input_into_pulses():
    clock = VirtualClock()
    idle_readings = iter([0.2, 5.0, 0.0])
    source = SystemIdleEventSource(
        ticker_factory=clock.create_ticker,
        idle_seconds_provider=lambda: next(idle_readings),
    )
    received = []
    source.subscribe(received.append)

    clock.advance(3)

    assert received == [ActivityKind.SYSTEM_INPUT, ActivityKind.SYSTEM_INPUT]


def test_system_idle_source_stops_polling_when_idle_query_fails():
    clock = VirtualClock()
    calls = []

    def failing_provider():
        calls.append(clock.now())
        raise OSError("unavailable")

    source = SystemIdleEventSource(ticker_factory=clock.create_ticker)
    source.set_idle_seconds_provider(failing_provider)
    source.subscribe(lambda kind: None)

    clock.advance(10)

    assert calls == [1.0]


@pytest.fixture
def qt_protection():
    created = []

    def factory(source):
        clock = VirtualClock()
        protection = HyperfocusProtection(
            EngineConfig(),
            event_source=source,
            clock=clock,
            ticker_factory=clock.create_ticker,
        )
        protection.start()
        created.append(protection)
        return protection

    yield factory

    for protection in created:
        protection.shutdown()


def test_tray_source_keeps_session_when_popup_deactivates_app(qt_protection):
    source = QtActivityEventSource(close_on_blur=False)
    protection = qt_protection(source)

    source._on_application_state_changed(Qt.ApplicationState.ApplicationActive)
    protection.trigger_break_suggestion(40)
    assert protection.on_take_break(10)
    source._on_application_state_changed(Qt.ApplicationState.ApplicationInactive)

    session = protection.current_session
    assert session is not None
    assert session.breaks_taken == 1
    assert session.total_break_time == 10


def test_windowed_source_reports_deactivation_as_blur(qt_protection):
    source = QtActivityEventSource()
    protection = qt_protection(source)

    source._on_application_state_changed(Qt.ApplicationState.ApplicationActive)
    assert protection.current_session is not None

    source._on_application_state_changed(Qt.ApplicationState.ApplicationInactive)

    assert protection.current_session is None
