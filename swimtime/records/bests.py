"""Per-lap personal-best tracking."""

from __future__ import annotations

from enum import Enum
from typing import Dict, Iterable, List, Mapping, Tuple

from .schema import Lap, Swimmer, TimeRecord


class LapComparison(str, Enum):
    FASTER = "faster"
    SLOWER = "slower"
    NEUTRAL = "neutral"


def classify(best_lap_times: Mapping[int, int], lap_number: int, split_time: int) -> LapComparison:
    """Compare a split against the best split ever recorded at ``lap_number``."""

    best = best_lap_times.get(lap_number)
    if best is None or split_time == best:
        return LapComparison.NEUTRAL
    if split_time < best:
        return LapComparison.FASTER
    return LapComparison.SLOWER


def merge_bests(best_lap_times: Mapping[int, int], laps: Iterable[Lap]) -> Dict[int, int]:
    """Return a new best map with each lap's split folded in (minimum per lap number)."""

    merged = dict(best_lap_times)
    for lap in laps:
        current = merged.get(lap.number)
        if current is None or lap.split_time < current:
            merged[lap.number] = lap.split_time
    return merged


def rebuild_bests(times: Iterable[TimeRecord]) -> Dict[int, int]:
    """Recompute the best map from full history instead of trusting a cached one."""

    bests: Dict[int, int] = {}
    for record in times:
        bests = merge_bests(bests, record.laps)
    return bests


def compare_laps(best_lap_times: Mapping[int, int], laps: Iterable[Lap]) -> List[Tuple[Lap, LapComparison]]:
    return [(lap, classify(best_lap_times, lap.number, lap.split_time)) for lap in laps]


def bests_consistent(swimmer: Swimmer) -> bool:
    """True when the swimmer's cached best map matches its history."""

    return dict(swimmer.best_lap_times) == rebuild_bests(swimmer.times)


__all__ = [
    "LapComparison",
    "classify",
    "merge_bests",
    "rebuild_bests",
    "compare_laps",
    "bests_consistent",
]
