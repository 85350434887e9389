"""
Clock implementations for submission timestamps.

Timestamps are integer epoch milliseconds. Production uses SystemClock;
tests use FixedClock so that collisions and ordering are under control.
"""

import time
from dataclasses import dataclass


class SystemClock:
    """Wall clock in epoch milliseconds."""

    def now_ms(self) -> int:
        return int(time.time() * 1000)


@dataclass
class FixedClock:
    """
    Manually driven clock.

    now_ms() returns the current value without advancing; tick() advances it.
    Leaving the clock untouched between submissions produces identical
    timestamps, which exercises the log-order tie-break.
    """
    current: int = 0

    def now_ms(self) -> int:
        return self.current

    def tick(self, step: int = 1) -> int:
        self.current += step
        return self.current
