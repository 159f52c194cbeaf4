"""
Fixed-interval tick source.
"""

import logging
import time
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class IntervalTicker:
    """
    Produces ticks on a fixed schedule of a monotonic clock.

    The first tick fires immediately. When a cycle overruns one or more
    intervals the missed ticks are dropped and the schedule continues from
    the next future slot, so a slow cycle never causes a burst of
    catch-up ticks.

    Args:
        interval: Seconds between ticks.
        wait: Blocks for the given seconds and returns True when the wait
            was interrupted by a stop request (``threading.Event.wait``).
        clock: Monotonic clock in seconds.
    """

    def __init__(self, interval: float, wait: Callable[[float], bool],
                 clock: Callable[[], float] = time.monotonic):
        if interval <= 0:
            raise ValueError(f"interval must be > 0, got {interval}")
        self.interval = interval
        self.wait = wait
        self.clock = clock
        self.skipped = 0
        self._next: Optional[float] = None

    def wait_next(self) -> bool:
        """
        Block until the next tick.

        Returns:
            False if a stop was requested while waiting, True on a tick.
        """
        now = self.clock()
        if self._next is None:
            self._next = now
        delay = self._next - now
        if delay > 0 and self.wait(delay):
            return False

        now = self.clock()
        missed = int((now - self._next) // self.interval)
        if missed > 0:
            self.skipped += missed
            logger.debug(f"Sampler fell behind, skipping {missed} missed ticks")
        self._next += (missed + 1) * self.interval
        return True
