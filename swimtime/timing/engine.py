"""Stopwatch state machine with lap splitting.

The engine owns elapsed time, the running flag and the recorded laps. Time is
read from an injected clock, so callers (and tests) decide how time advances.
Elapsed time is tracked in whole milliseconds.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple

from loguru import logger

from ..records.schema import Lap
from .clock import Clock, MonotonicClock


class TimerPhase(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


@dataclass(frozen=True)
class TimerRun:
    """Point-in-time view of a stopwatch run."""

    elapsed: int
    laps: Tuple[Lap, ...]
    running: bool = False


class TimerEngine:
    """Single stopwatch: start/stop (pause and resume), laps, reset and one-shot logging."""

    def __init__(self, clock: Optional[Clock] = None, on_complete: Optional[Callable[[TimerRun], None]] = None):
        self.clock = clock or MonotonicClock()
        self.on_complete = on_complete
        self._elapsed = 0
        self._running = False
        self._laps: List[Lap] = []
        self._last_lap_mark = 0
        self._anchor: Optional[float] = None
        self._has_logged = False

    @property
    def elapsed(self) -> int:
        return self._elapsed

    @property
    def running(self) -> bool:
        return self._running

    @property
    def laps(self) -> Tuple[Lap, ...]:
        return tuple(self._laps)

    @property
    def has_logged(self) -> bool:
        return self._has_logged

    @property
    def phase(self) -> TimerPhase:
        if self._running:
            return TimerPhase.RUNNING
        if self._elapsed == 0 and not self._laps:
            return TimerPhase.IDLE
        return TimerPhase.STOPPED

    def snapshot(self) -> TimerRun:
        return TimerRun(elapsed=self._elapsed, laps=tuple(self._laps), running=self._running)

    def start(self) -> bool:
        if self._running:
            return False
        # Anchor so that elapsed keeps counting up from its current value.
        self._anchor = self.clock.now_ms() - self._elapsed
        self._running = True
        self._has_logged = False
        logger.debug("Timer started at elapsed={}ms", self._elapsed)
        return True

    def tick(self) -> int:
        """Recompute elapsed from the clock. Elapsed never decreases while running."""

        if self._running and self._anchor is not None:
            current = int(self.clock.now_ms() - self._anchor)
            if current > self._elapsed:
                self._elapsed = current
        return self._elapsed

    def stop(self) -> bool:
        if not self._running:
            return False
        self.tick()
        self._running = False
        self._anchor = None
        logger.debug("Timer stopped at elapsed={}ms with {} laps", self._elapsed, len(self._laps))
        if self.on_complete is not None:
            self.on_complete(self.snapshot())
        return True

    def record_lap(self) -> Optional[Lap]:
        """Append a lap at the current elapsed time. Returns ``None`` when not running."""

        if not self._running:
            return None
        elapsed = self.tick()
        lap = Lap(number=len(self._laps) + 1, time=elapsed, split_time=elapsed - self._last_lap_mark)
        self._laps.append(lap)
        self._last_lap_mark = elapsed
        logger.debug("Lap {} recorded: time={}ms split={}ms", lap.number, lap.time, lap.split_time)
        return lap

    def reset(self) -> None:
        """Return to idle. A running timer is stopped without calling ``on_complete``."""

        self._running = False
        self._anchor = None
        self._elapsed = 0
        self._laps = []
        self._last_lap_mark = 0
        self._has_logged = False
        logger.debug("Timer reset")

    # Logging a run is one-shot: the flag clears on start() and reset().
    def can_log(self) -> bool:
        return self._elapsed > 0 and not self._has_logged

    def mark_logged(self) -> None:
        self._has_logged = True


__all__ = ["TimerEngine", "TimerPhase", "TimerRun"]
