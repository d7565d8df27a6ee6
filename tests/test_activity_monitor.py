import math

from focus_guard.activity_monitor import ActivityMonitor
from focus_guard.event_source import ActivityKind, SimulatedEventSource
from focus_guard.ticker import VirtualClock


def test_no_activity_means_infinitely_idle():
    monitor = ActivityMonitor(VirtualClock())
    assert monitor.last_activity_time is None
    assert monitor.time_since_last_activity() == math.inf
    assert not monitor.is_active(8)


def test_record_activity_updates_timestamp():
    clock = VirtualClock(start=100.0)
    monitor = ActivityMonitor(clock)

    monitor.record_activity(ActivityKind.CLICK)
    clock.advance(3)

    assert monitor.last_activity_time == 100.0
    assert monitor.time_since_last_activity() == 3.0
    assert monitor.is_active(8)


def test_is_active_uses_strict_grace_boundary():
    clock = VirtualClock()
    monitor = ActivityMonitor(clock)
    monitor.record_activity()

    clock.advance(7.5)
    assert monitor.is_active(8)
    clock.advance(0.5)
    assert not monitor.is_active(8)


def test_repeated_pulses_within_same_instant_are_idempotent():
    clock = VirtualClock(start=42.0)
    monitor = ActivityMonitor(clock)

    for _ in range(1000):
        monitor.record_activity(ActivityKind.POINTER_MOVE)

    assert monitor.last_activity_time == 42.0


def test_time_since_last_activity_is_a_pure_read():
    clock = VirtualClock()
    monitor = ActivityMonitor(clock)
    monitor.record_activity()
    clock.advance(5)

    first = monitor.time_since_last_activity()
    second = monitor.time_since_last_activity()

    assert first == second == 5.0
    assert monitor.last_activity_time == 0.0


def test_blur_is_relayed_without_counting_as_activity():
    clock = VirtualClock()
    monitor = ActivityMonitor(clock)
    blurs = []
    monitor.add_blur_listener(lambda: blurs.append(clock.now()))
    monitor.record_activity()
    clock.advance(20)

    monitor.record_blur()

    assert blurs == [20.0]
    assert monitor.last_activity_time == 0.0


def test_window_focus_counts_as_activity():
    clock = VirtualClock()
    monitor = ActivityMonitor(clock)
    source = SimulatedEventSource()
    source.subscribe(monitor.record_activity, monitor.record_blur)
    clock.advance(12)

    source.emit_focus()

    assert monitor.last_activity_time == 12.0
