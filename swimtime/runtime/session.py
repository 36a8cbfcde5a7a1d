"""Stopwatch session tying the timer engine to the swimmer roster and store."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from loguru import logger

from ..records.bests import LapComparison, compare_laps, merge_bests
from ..records.schema import Distance, Lap, Stroke, Swimmer, TimeRecord
from ..store.base import SwimmerStore, Unsubscribe
from ..timing.engine import TimerEngine


@dataclass
class SessionConfig:
    default_stroke: str = Stroke.FREESTYLE.value
    default_distance: str = Distance.M50.value


class TimingSession:
    """Roster cache, current selection and the commit path for stopwatch runs.

    The roster is refreshed from the store subscription; the session never
    writes to it directly. Concurrent commits against the same swimmer from
    other sessions are last-write-wins at the store.
    """

    def __init__(self, store: SwimmerStore, engine: Optional[TimerEngine] = None, config: Optional[SessionConfig] = None):
        self.store = store
        self.engine = engine or TimerEngine()
        self.config = config or SessionConfig()
        self.swimmers: List[Swimmer] = []
        self.selected_swimmer: Optional[str] = None
        self.stroke = Stroke(self.config.default_stroke)
        self.distance = Distance(self.config.default_distance)
        self._unsubscribe: Optional[Unsubscribe] = None
        self._committing = False

    async def load(self) -> List[Swimmer]:
        self.swimmers = await self.store.list_swimmers()
        if self._unsubscribe is None:
            self._unsubscribe = await self.store.subscribe(self._on_snapshot)
        return self.swimmers

    def _on_snapshot(self, swimmers: List[Swimmer]) -> None:
        self.swimmers = swimmers

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def get_swimmer(self, swimmer_id: Optional[str]) -> Optional[Swimmer]:
        return next((swimmer for swimmer in self.swimmers if swimmer.id == swimmer_id), None)

    @property
    def current_swimmer(self) -> Optional[Swimmer]:
        return self.get_swimmer(self.selected_swimmer)

    def select_swimmer(self, swimmer_id: Optional[str]) -> None:
        self.selected_swimmer = swimmer_id

    def select_event(self, stroke: str, distance: str) -> None:
        self.stroke = Stroke(stroke)
        self.distance = Distance(distance)

    async def create_swimmer(self, name: str) -> Optional[Swimmer]:
        name = (name or "").strip()
        if not name:
            return None
        return await self.store.add_swimmer(name)

    async def remove_swimmer(self, swimmer_id: str) -> bool:
        removed = await self.store.delete_swimmer(swimmer_id)
        if removed and self.selected_swimmer == swimmer_id:
            self.selected_swimmer = None
        return removed

    async def log_time(self) -> Optional[TimeRecord]:
        """Commit the current run for the selected swimmer.

        Returns the new record, or ``None`` when there is nothing to log, the
        run was already logged or is being logged, or the store rejected the write.
        """

        self.engine.tick()
        swimmer = self.current_swimmer
        if swimmer is None or self._committing or not self.engine.can_log():
            return None

        # Held across the store write so an overlapping call cannot commit the same run.
        self._committing = True
        try:
            return await self._commit(swimmer)
        finally:
            self._committing = False

    async def _commit(self, swimmer: Swimmer) -> Optional[TimeRecord]:
        record = TimeRecord.from_run(self.engine.snapshot(), self.stroke, self.distance)
        times = [*swimmer.times, record]
        best_lap_times = merge_bests(swimmer.best_lap_times, record.laps)
        ok = await self.store.update_swimmer(swimmer.id, {"times": times, "bestLapTimes": best_lap_times})
        if not ok:
            logger.warning("Time for swimmer {} was not saved", swimmer.id)
            return None
        self.engine.mark_logged()
        logger.info(
            "Logged {}ms {} {} for swimmer {} ({} laps)",
            record.time,
            record.stroke.value,
            record.distance.value,
            swimmer.id,
            len(record.laps),
        )
        return record

    def lap_comparisons(self) -> List[Tuple[Lap, LapComparison]]:
        swimmer = self.current_swimmer
        bests = swimmer.best_lap_times if swimmer is not None else {}
        return compare_laps(bests, self.engine.laps)


__all__ = ["TimingSession", "SessionConfig"]
