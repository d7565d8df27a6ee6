import pytest

from focus_guard.activity_monitor import ActivityMonitor
from focus_guard.session_tracker import FocusSessionTracker, TrackerState
from focus_guard.ticker import VirtualClock


@pytest.fixture
def clock():
    return VirtualClock()


@pytest.fixture
def monitor(clock):
    return ActivityMonitor(clock)


@pytest.fixture
def tracker(monitor, clock):
    return FocusSessionTracker(monitor, clock=clock)


def test_starts_idle(tracker):
    assert tracker.state is TrackerState.IDLE
    assert tracker.current_session is None


def test_first_activity_opens_session(tracker, monitor, clock):
    started = []
    tracker.sessionStarted.connect(started.append)
    clock.advance(30)

    monitor.record_activity()

    assert tracker.state is TrackerState.ACTIVE
    session = tracker.current_session
    assert session.start_time == 30.0
    assert session.end_time is None
    assert session.breaks_taken == 0
    assert started == [session]


def test_same_instant_pulses_do_not_create_a_second_session(tracker, monitor):
    started = []
    tracker.sessionStarted.connect(started.append)

    monitor.record_activity()
    first = tracker.current_session
    monitor.record_activity()

    assert tracker.current_session is first
    assert len(started) == 1


def test_poll_closes_session_after_five_idle_minutes(tracker, monitor, clock):
    ended = []
    tracker.sessionEnded.connect(ended.append)
    monitor.record_activity()
    session = tracker.current_session

    clock.advance(299)
    tracker.poll()
    assert tracker.state is TrackerState.ACTIVE

    clock.advance(1)
    tracker.poll()

    assert tracker.state is TrackerState.IDLE
    assert session.end_time == 300.0
    assert ended == [session]
    assert tracker.last_closed_session is session


def test_blur_closes_active_session(tracker, monitor, clock):
    monitor.record_activity()
    session = tracker.current_session
    clock.advance(45)

    monitor.record_blur()

    assert tracker.state is TrackerState.IDLE
    assert session.end_time == 45.0


def test_blur_while_idle_is_a_no_op(tracker, monitor):
    ended = []
    tracker.sessionEnded.connect(ended.append)

    monitor.record_blur()

    assert tracker.state is TrackerState.IDLE
    assert ended == []


def test_activity_after_close_starts_a_fresh_session(tracker, monitor, clock):
    monitor.record_activity()
    old = tracker.current_session
    monitor.record_blur()
    clock.advance(10)

    monitor.record_activity()

    assert tracker.current_session is not old
    assert tracker.current_session.start_time == 10.0


def test_record_break_restarts_clock_and_keeps_counters(tracker, monitor, clock):
    monitor.record_activity()
    session = tracker.current_session
    clock.advance_minutes(40)

    tracker.record_break(10)
    clock.advance_minutes(50)
    tracker.record_break(15)

    assert tracker.current_session is session
    assert session.start_time == 90 * 60.0
    assert session.breaks_taken == 2
    assert session.total_break_time == 25


def test_record_break_without_session_is_ignored(tracker):
    assert tracker.record_break(10) is None


def test_end_time_never_precedes_start_time(tracker, monitor, clock):
    monitor.record_activity()
    session = tracker.current_session

    tracker.close_session("test")

    assert session.end_time >= session.start_time
