from datetime import UTC, datetime

from src.adapters.clock import FixedClock, SystemClock


def test_system_clock_is_utc():
    now = SystemClock().now_utc()
    assert now.tzinfo is UTC


def test_fixed_clock():
    t0 = datetime(2024, 1, 1, tzinfo=UTC)
    clock = FixedClock(t0)
    assert clock.now_utc() == t0
    assert clock.now_utc() == t0

    t1 = datetime(2024, 2, 1, tzinfo=UTC)
    clock.set(t1)
    assert clock.now_utc() == t1
