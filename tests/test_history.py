from __future__ import annotations

import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from swimtime.records.history import (
    best_by_stroke,
    best_time,
    chronological,
    events_with_times,
    improvement,
    personal_best_flags,
    recent_times,
    timeline,
)
from swimtime.records.schema import Distance, Stroke, TimeRecord


def make_record(time, stroke="Freestyle", distance="50m", date="2024-01-01T10:00:00Z", record_id=None):
    fields = dict(time=time, stroke=stroke, distance=distance, date=date)
    if record_id is not None:
        fields["id"] = record_id
    return TimeRecord(**fields)


def test_best_time_filters_by_stroke_and_distance():
    times = [
        make_record(100),
        make_record(90),
        make_record(80, stroke="Backstroke"),
    ]
    assert best_time(times, "Freestyle", "50m") == 90
    assert best_time(times) == 80
    assert best_time(times, distance="50m") == 80
    assert best_time(times, stroke=Stroke.FREESTYLE) == 90
    assert best_time(times, "Butterfly", "50m") is None
    assert best_time([]) is None


def test_chronological_orders_by_date():
    times = [
        make_record(100, date="2024-01-02", record_id="b"),
        make_record(90, date="2024-01-01", record_id="a"),
        make_record(70, stroke="Backstroke", date="2023-12-01", record_id="x"),
        make_record(95, date="2024-01-03", record_id="c"),
    ]
    ordered = chronological(times, "Freestyle", "50m")
    assert [r.id for r in ordered] == ["a", "b", "c"]


def test_chronological_keeps_order_of_equal_dates():
    times = [make_record(t, date="2024-02-01T08:00:00Z", record_id=str(t)) for t in (50, 40, 60)]
    assert [r.id for r in chronological(times, "Freestyle", "50m")] == ["50", "40", "60"]


def test_chronological_mixes_date_shapes():
    times = [
        make_record(1, date={"seconds": 1704153600, "nanoseconds": 0}, record_id="jan2"),
        make_record(2, date="2024-01-01T00:00:00Z", record_id="jan1"),
        make_record(3, date=1704240000000, record_id="jan3"),
    ]
    assert [r.id for r in chronological(times, "Freestyle", "50m")] == ["jan1", "jan2", "jan3"]


def test_improvement_deltas():
    ordered = [make_record(t) for t in (100, 90, 95)]
    assert improvement(ordered) == [None, 10, -5]
    assert improvement([]) == []


def test_personal_best_flags_count_ties():
    ordered = [make_record(t) for t in (100, 90, 95, 90)]
    assert personal_best_flags(ordered) == [False, True, False, True]
    assert personal_best_flags([]) == []


def test_timeline_combines_order_delta_and_pb():
    times = [
        make_record(95, date="2024-01-03"),
        make_record(100, date="2024-01-01"),
        make_record(90, date="2024-01-02"),
    ]
    entries = timeline(times, "Freestyle", "50m")
    assert [e.record.time for e in entries] == [100, 90, 95]
    assert [e.delta for e in entries] == [None, 10, -5]
    assert [e.is_personal_best for e in entries] == [False, True, False]


def test_recent_times_newest_first():
    times = [make_record(t, date=f"2024-01-0{t}") for t in range(1, 8)]
    assert [r.time for r in recent_times(times)] == [7, 6, 5, 4, 3]
    assert [r.time for r in recent_times(times, limit=2)] == [7, 6]


def test_best_by_stroke_and_events():
    times = [
        make_record(100),
        make_record(120, stroke="Butterfly"),
        make_record(110, stroke="Butterfly"),
        make_record(300, distance="100m"),
    ]
    assert best_by_stroke(times, "50m") == {Stroke.FREESTYLE: 100, Stroke.BUTTERFLY: 110}
    assert events_with_times(times) == [
        (Stroke.FREESTYLE, Distance.M50),
        (Stroke.FREESTYLE, Distance.M100),
        (Stroke.BUTTERFLY, Distance.M50),
    ]
