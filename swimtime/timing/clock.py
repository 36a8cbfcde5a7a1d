"""Clock sources used to measure stopwatch time."""

from __future__ import annotations

import time
from typing import Protocol


class Clock(Protocol):
    def now_ms(self) -> float: ...


class MonotonicClock:
    """Milliseconds from :func:`time.monotonic`, unaffected by wall-clock changes."""

    def now_ms(self) -> float:
        return time.monotonic() * 1000.0


class ManualClock:
    """Clock that only moves when told to. Used for tests and replays."""

    def __init__(self, start_ms: float = 0.0):
        self._now = float(start_ms)

    def now_ms(self) -> float:
        return self._now

    def advance(self, ms: float) -> float:
        if ms < 0:
            raise ValueError(f"cannot move clock backwards by {ms} ms")
        self._now += ms
        return self._now

    def set(self, ms: float) -> None:
        if ms < self._now:
            raise ValueError(f"cannot move clock backwards from {self._now} to {ms}")
        self._now = float(ms)


__all__ = ["Clock", "MonotonicClock", "ManualClock"]
