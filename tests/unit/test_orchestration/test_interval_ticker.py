"""
Unit tests for the IntervalTicker.
"""

import pytest

from procmon.orchestration import IntervalTicker


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self):
        self.now = 0.0
        self.waits = []

    def __call__(self) -> float:
        return self.now

    def wait(self, delay: float) -> bool:
        self.waits.append(delay)
        self.now += delay
        return False


@pytest.mark.unit
class TestIntervalTicker:
    """Test cases for tick scheduling."""

    def test_first_tick_is_immediate(self):
        clock = FakeClock()
        ticker = IntervalTicker(1.0, clock.wait, clock)

        assert ticker.wait_next() is True
        assert clock.waits == []

    def test_regular_ticks_wait_one_interval(self):
        clock = FakeClock()
        ticker = IntervalTicker(2.0, clock.wait, clock)
        ticker.wait_next()

        clock.now += 0.5  # work done during the cycle
        ticker.wait_next()

        assert clock.waits == [1.5]
        assert clock.now == 2.0

    def test_missed_ticks_are_skipped(self):
        """An overrun resumes on the next future slot without catch-up ticks."""
        clock = FakeClock()
        ticker = IntervalTicker(1.0, clock.wait, clock)
        ticker.wait_next()

        clock.now = 3.5
        assert ticker.wait_next() is True
        assert ticker.skipped == 2
        assert clock.waits == []

        ticker.wait_next()
        assert clock.now == 4.0
        assert clock.waits == [0.5]

    def test_stop_during_wait(self):
        clock = FakeClock()
        ticker = IntervalTicker(1.0, lambda delay: True, clock)
        ticker.wait_next()

        assert ticker.wait_next() is False

    def test_rejects_non_positive_interval(self):
        with pytest.raises(ValueError):
            IntervalTicker(0, lambda delay: False)
