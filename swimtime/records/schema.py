"""Pydantic models for swimmers, their time records and recorded laps.

Field aliases mirror the document keys used by the backing store
(``splitTime``, ``bestLapTimes``...), so models round-trip through store
documents with ``model_dump(by_alias=True)``.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Mapping, Optional, Tuple

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .dates import ensure_datetime, utcnow

if TYPE_CHECKING:  # pragma: no cover
    from ..timing.engine import TimerRun


def generate_id() -> str:
    return uuid.uuid4().hex


class Stroke(str, Enum):
    FREESTYLE = "Freestyle"
    BACKSTROKE = "Backstroke"
    BREASTSTROKE = "Breaststroke"
    BUTTERFLY = "Butterfly"
    INDIVIDUAL_MEDLEY = "Individual Medley"


class Distance(str, Enum):
    M25 = "25m"
    M50 = "50m"
    M100 = "100m"
    M200 = "200m"
    M400 = "400m"
    M800 = "800m"
    M1500 = "1500m"


class Lap(BaseModel):
    """A single lap mark. ``time`` is cumulative, ``split_time`` is since the previous mark."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    number: int = Field(ge=1)
    time: int = Field(ge=0)
    split_time: int = Field(ge=0, alias="splitTime")


class TimeRecord(BaseModel):
    """One committed stopwatch run. Never mutated; corrections are new records."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str = Field(default_factory=generate_id)
    time: int = Field(ge=0)
    date: datetime = Field(default_factory=utcnow)
    stroke: Stroke
    distance: Distance
    laps: Tuple[Lap, ...] = ()

    @field_validator("date", mode="before")
    @classmethod
    def _coerce_date(cls, value: Any) -> datetime:
        return ensure_datetime(value)

    @classmethod
    def from_run(
        cls,
        run: "TimerRun",
        stroke: Stroke,
        distance: Distance,
        date: Optional[datetime] = None,
    ) -> "TimeRecord":
        return cls(
            time=run.elapsed,
            date=date if date is not None else utcnow(),
            stroke=stroke,
            distance=distance,
            laps=run.laps,
        )


class Swimmer(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    name: str
    times: List[TimeRecord] = Field(default_factory=list)
    best_lap_times: Dict[int, int] = Field(default_factory=dict, alias="bestLapTimes")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")

    @field_validator("created_at", mode="before")
    @classmethod
    def _coerce_created_at(cls, value: Any) -> Optional[datetime]:
        return None if value is None else ensure_datetime(value)

    def to_document(self) -> Dict[str, Any]:
        """Store document for this swimmer (the id lives outside the document)."""

        return self.model_dump(mode="json", by_alias=True, exclude={"id"}, exclude_none=True)

    @classmethod
    def from_document(cls, doc_id: str, doc: Mapping[str, Any]) -> "Swimmer":
        """Build a swimmer from a raw store document, dropping unreadable time records."""

        records: List[TimeRecord] = []
        for raw in doc.get("times") or []:
            try:
                records.append(TimeRecord.model_validate(raw))
            except ValidationError as exc:
                logger.warning("Skipping malformed time record on swimmer {}: {}", doc_id, exc)
        return cls(
            id=doc_id,
            name=doc.get("name") or "",
            times=records,
            best_lap_times=doc.get("bestLapTimes") or {},
            created_at=doc.get("createdAt"),
        )


class ClubSettings(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = "Swim Club"
    logo_url: Optional[str] = Field(default=None, alias="logoUrl")


__all__ = [
    "Stroke",
    "Distance",
    "Lap",
    "TimeRecord",
    "Swimmer",
    "ClubSettings",
    "generate_id",
]
