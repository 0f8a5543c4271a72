"""Time sources for fee event timestamps."""

from __future__ import annotations

import time
from typing import Protocol


class Clock(Protocol):
    """Anything that returns the current time in milliseconds."""

    def now_ms(self) -> int: ...


class SystemClock:
    """Wall clock, in milliseconds since the epoch."""

    def now_ms(self) -> int:
        return time.time_ns() // 1_000_000


class ManualClock:
    """Clock that only moves when told to. Used by tests and simulations."""

    def __init__(self, start_ms: int = 0) -> None:
        self._now = start_ms

    def now_ms(self) -> int:
        return self._now

    def advance(self, ms: int = 1) -> int:
        """Move the clock forward and return the new time."""
        if ms < 0:
            raise ValueError(f"Clock cannot move backwards: {ms}")
        self._now += ms
        return self._now

    def set(self, now_ms: int) -> None:
        if now_ms < self._now:
            raise ValueError(f"Clock cannot move backwards: {now_ms} < {self._now}")
        self._now = now_ms
