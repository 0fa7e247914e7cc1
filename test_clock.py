"""Countdown clock: monotonic ticks, single expiry, irreversible stop."""
from examcore.clock import SessionClock, format_time


class FakeTime:
    def __init__(self, now=100.0):
        self.now = now

    def __call__(self):
        return self.now


def _clock(minutes, fired, time_func=None):
    return SessionClock(minutes, lambda: fired.append(True), time_func=time_func or FakeTime())


def test_ticks_down_by_one_and_fires_once():
    fired = []
    clock = _clock(1, fired)
    clock.start()
    assert clock.time_left == 60

    seen = []
    for _ in range(60):
        before = clock.time_left
        after = clock.tick()
        assert after == before - 1
        seen.append(after)
    assert seen[-1] == 0
    assert fired == [True]
    assert not clock.running

    for _ in range(5):
        clock.tick()
    assert clock.time_left == 0
    assert fired == [True]


def test_tick_before_start_does_nothing():
    fired = []
    clock = _clock(1, fired)
    assert clock.tick() == 60
    assert fired == []


def test_stop_is_irreversible():
    fired = []
    clock = _clock(1, fired)
    clock.start()
    clock.tick()
    clock.stop()
    clock.tick()
    clock.start()
    clock.tick()
    assert clock.time_left == 59
    assert not clock.running
    assert fired == []


def test_catch_up_applies_whole_elapsed_seconds():
    fired = []
    now = FakeTime(100.0)
    clock = _clock(1, fired, time_func=now)
    clock.start()

    assert clock.catch_up(100.9) == 60
    assert clock.catch_up(102.5) == 58
    now.now = 110.0
    assert clock.catch_up() == 50
    assert clock.catch_up(10_000.0) == 0
    assert fired == [True]


def test_zero_duration_expires_on_start():
    fired = []
    clock = _clock(0, fired)
    clock.start()
    assert clock.time_left == 0
    assert fired == [True]


def test_running_low_below_five_minutes():
    fired = []
    clock = _clock(5, fired)
    clock.start()
    assert not clock.is_running_low
    clock.tick()
    assert clock.is_running_low
    assert clock.display == "04:59"


def test_format_time():
    assert format_time(125) == "02:05"
    assert format_time(0) == "00:00"
    assert format_time(-3) == "00:00"
    assert format_time(3600) == "60:00"
