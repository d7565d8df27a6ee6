import pytest

from focus_guard.ticker import VirtualClock


def test_manual_ticker_fires_on_each_period():
    clock = VirtualClock()
    fired = []
    ticker = clock.create_ticker(10, lambda: fired.append(clock.now()))
    ticker.start()

    clock.advance(35)

    assert fired == [10.0, 20.0, 30.0]
    assert clock.now() == 35.0


def test_ticker_does_not_fire_before_start_or_after_stop():
    clock = VirtualClock()
    fired = []
    ticker = clock.create_ticker(1, lambda: fired.append(clock.now()))

    clock.advance(5)
    ticker.start()
    clock.advance(2)
    ticker.stop()
    clock.advance(5)

    assert fired == [6.0, 7.0]
    assert not ticker.is_active


def test_tickers_fire_in_chronological_then_creation_order():
    clock = VirtualClock()
    order = []
    fast = clock.create_ticker(1, lambda: order.append(("fast", clock.now())))
    slow = clock.create_ticker(2, lambda: order.append(("slow", clock.now())))
    slow.start()
    fast.start()

    clock.advance(2)

    assert order == [("fast", 1.0), ("fast", 2.0), ("slow", 2.0)]


def test_callback_can_stop_its_own_ticker():
    clock = VirtualClock()
    ticker = clock.create_ticker(1, lambda: ticker.stop())
    ticker.start()

    clock.advance(5)

    assert ticker.fire_count == 1


def test_clock_cannot_go_backwards():
    with pytest.raises(ValueError):
        VirtualClock().advance(-1)


def test_interval_must_be_positive():
    with pytest.raises(ValueError):
        VirtualClock().create_ticker(0, lambda: None)
