"""Pydantic models for FastAPI I/O."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel

from ..records.bests import LapComparison
from ..records.schema import Distance, Lap, Stroke, TimeRecord


class TimerSnapshot(BaseModel):
    elapsed: int
    display: str
    running: bool
    phase: str
    laps: List[Lap]
    has_logged: bool
    changed: Optional[bool] = None


class SwimmerCreate(BaseModel):
    name: str


class LogTimeRequest(BaseModel):
    swimmer_id: str
    stroke: Optional[Stroke] = None
    distance: Optional[Distance] = None


class BestTimeSummary(BaseModel):
    swimmer_id: str
    stroke: Optional[Stroke] = None
    distance: Optional[Distance] = None
    best: Optional[int] = None
    display: Optional[str] = None


class TimelineItem(BaseModel):
    record: TimeRecord
    delta: Optional[int] = None
    is_personal_best: bool


class LapComparisonItem(BaseModel):
    lap: Lap
    comparison: LapComparison
    best_split: Optional[int] = None


__all__ = [
    "TimerSnapshot",
    "SwimmerCreate",
    "LogTimeRequest",
    "BestTimeSummary",
    "TimelineItem",
    "LapComparisonItem",
]
