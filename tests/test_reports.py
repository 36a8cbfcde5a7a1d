from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

pd = pytest.importorskip("pandas")

from swimtime.records.reports import TIME_COLUMNS, best_time_grid, times_frame
from swimtime.records.schema import Swimmer, TimeRecord


def make_swimmer():
    times = [
        TimeRecord(id="b", time=100, stroke="Freestyle", distance="50m", date="2024-01-02"),
        TimeRecord(id="a", time=90, stroke="Freestyle", distance="50m", date="2024-01-01"),
        TimeRecord(id="c", time=80, stroke="Backstroke", distance="50m", date="2024-01-03"),
    ]
    return Swimmer(id="ada", name="Ada", times=times)


def test_times_frame_rows_sorted_by_date():
    df = times_frame([make_swimmer(), Swimmer(id="grace", name="Grace")])
    assert list(df.columns) == TIME_COLUMNS
    assert list(df["record_id"]) == ["a", "b", "c"]
    assert set(df["swimmer"]) == {"Ada"}


def test_times_frame_empty():
    df = times_frame([])
    assert df.empty
    assert list(df.columns) == TIME_COLUMNS


def test_best_time_grid():
    grid = best_time_grid(make_swimmer())
    assert grid.loc["Freestyle", "50m"] == 90
    assert grid.loc["Backstroke", "50m"] == 80
    assert pd.isna(grid.loc["Butterfly", "100m"])
    assert grid.shape == (5, 7)


def test_best_time_grid_without_history():
    grid = best_time_grid(Swimmer(id="grace", name="Grace"))
    assert grid.shape == (5, 7)
    assert grid.isna().all().all()
