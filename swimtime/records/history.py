"""Queries over a swimmer's time history: best times, timelines and improvements."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .schema import Distance, Stroke, TimeRecord


@dataclass(frozen=True)
class TimelineEntry:
    record: TimeRecord
    delta: Optional[int]
    is_personal_best: bool


def _matches(record: TimeRecord, stroke: Optional[str], distance: Optional[str]) -> bool:
    return (not stroke or record.stroke == stroke) and (not distance or record.distance == distance)


def best_time(
    times: Iterable[TimeRecord],
    stroke: Optional[str] = None,
    distance: Optional[str] = None,
) -> Optional[int]:
    """Minimum time among records matching the given filters, or ``None``.

    An omitted filter matches every record.
    """

    matching = [record.time for record in times if _matches(record, stroke, distance)]
    return min(matching) if matching else None


def chronological(times: Iterable[TimeRecord], stroke: str, distance: str) -> List[TimeRecord]:
    """Records for exactly (stroke, distance), oldest first. Equal dates keep their order."""

    selected = [record for record in times if record.stroke == stroke and record.distance == distance]
    return sorted(selected, key=lambda record: record.date)


def improvement(records: Sequence[TimeRecord]) -> List[Optional[int]]:
    """Delta to the previous record for each entry; positive means faster.

    The first entry has nothing to compare against and gets ``None``.
    """

    deltas: List[Optional[int]] = []
    for i, record in enumerate(records):
        deltas.append(None if i == 0 else records[i - 1].time - record.time)
    return deltas


def personal_best_flags(records: Sequence[TimeRecord]) -> List[bool]:
    if not records:
        return []
    fastest = min(record.time for record in records)
    return [record.time == fastest for record in records]


def timeline(times: Iterable[TimeRecord], stroke: str, distance: str) -> List[TimelineEntry]:
    ordered = chronological(times, stroke, distance)
    return [
        TimelineEntry(record=record, delta=delta, is_personal_best=is_pb)
        for record, delta, is_pb in zip(ordered, improvement(ordered), personal_best_flags(ordered))
    ]


def recent_times(times: Iterable[TimeRecord], limit: int = 5) -> List[TimeRecord]:
    return sorted(times, key=lambda record: record.date, reverse=True)[:limit]


def best_by_stroke(times: Sequence[TimeRecord], distance: str) -> Dict[Stroke, int]:
    bests: Dict[Stroke, int] = {}
    for stroke in Stroke:
        best = best_time(times, stroke, distance)
        if best is not None:
            bests[stroke] = best
    return bests


def events_with_times(times: Sequence[TimeRecord]) -> List[Tuple[Stroke, Distance]]:
    present = {(record.stroke, record.distance) for record in times}
    return [(stroke, distance) for stroke in Stroke for distance in Distance if (stroke, distance) in present]


__all__ = [
    "TimelineEntry",
    "best_time",
    "chronological",
    "improvement",
    "personal_best_flags",
    "timeline",
    "recent_times",
    "best_by_stroke",
    "events_with_times",
]
