"""Tabular views of swimmer history for export and analysis."""

from __future__ import annotations

from typing import Dict, Iterable, List

import pandas as pd

from .schema import Distance, Stroke, Swimmer

TIME_COLUMNS = ["swimmer_id", "swimmer", "record_id", "date", "stroke", "distance", "time_ms", "laps"]


def times_frame(swimmers: Iterable[Swimmer]) -> pd.DataFrame:
    """One row per time record across all swimmers, oldest first."""

    rows: List[Dict[str, object]] = []
    for swimmer in swimmers:
        for record in swimmer.times:
            rows.append(
                {
                    "swimmer_id": swimmer.id,
                    "swimmer": swimmer.name,
                    "record_id": record.id,
                    "date": record.date,
                    "stroke": record.stroke.value,
                    "distance": record.distance.value,
                    "time_ms": record.time,
                    "laps": len(record.laps),
                }
            )
    df = pd.DataFrame(rows, columns=TIME_COLUMNS)
    if df.empty:
        return df
    return df.sort_values("date", kind="stable").reset_index(drop=True)


def best_time_grid(swimmer: Swimmer) -> pd.DataFrame:
    """Stroke x distance table of minimum times (NaN where nothing was swum)."""

    df = times_frame([swimmer])
    strokes = [stroke.value for stroke in Stroke]
    distances = [distance.value for distance in Distance]
    if df.empty:
        return pd.DataFrame(index=pd.Index(strokes, name="stroke"), columns=distances, dtype="float64")
    grid = df.pivot_table(index="stroke", columns="distance", values="time_ms", aggfunc="min")
    return grid.reindex(index=strokes, columns=distances)


__all__ = ["times_frame", "best_time_grid", "TIME_COLUMNS"]
