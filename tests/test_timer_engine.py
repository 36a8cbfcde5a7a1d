from __future__ import annotations

import random
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from swimtime.timing.clock import ManualClock
from swimtime.timing.engine import TimerEngine, TimerPhase


def make_engine():
    clock = ManualClock()
    return TimerEngine(clock=clock), clock


def test_laps_split_elapsed_time():
    engine, clock = make_engine()
    engine.start()
    clock.advance(3000)
    first = engine.record_lap()
    clock.advance(3250)
    second = engine.record_lap()
    clock.advance(2900)
    third = engine.record_lap()

    assert [lap.number for lap in engine.laps] == [1, 2, 3]
    assert (first.time, first.split_time) == (3000, 3000)
    assert (second.time, second.split_time) == (6250, 3250)
    assert (third.time, third.split_time) == (9150, 2900)
    assert sum(lap.split_time for lap in engine.laps) == engine.laps[-1].time


def test_record_lap_is_noop_when_not_running():
    engine, clock = make_engine()
    assert engine.record_lap() is None
    engine.start()
    clock.advance(1000)
    engine.record_lap()
    engine.stop()
    clock.advance(1000)
    assert engine.record_lap() is None
    assert len(engine.laps) == 1


def test_stop_then_start_resumes_from_elapsed():
    engine, clock = make_engine()
    engine.start()
    clock.advance(1000)
    engine.stop()
    assert engine.elapsed == 1000
    assert engine.phase == TimerPhase.STOPPED

    clock.advance(5000)
    assert engine.tick() == 1000

    engine.start()
    clock.advance(500)
    assert engine.tick() == 1500


def test_split_after_resume_excludes_paused_time():
    engine, clock = make_engine()
    engine.start()
    clock.advance(2000)
    engine.record_lap()
    engine.stop()
    clock.advance(60000)
    engine.start()
    clock.advance(1500)
    lap = engine.record_lap()
    assert lap.time == 3500
    assert lap.split_time == 1500


def test_start_and_stop_are_idempotent():
    engine, clock = make_engine()
    assert engine.start() is True
    clock.advance(100)
    assert engine.start() is False
    clock.advance(100)
    assert engine.tick() == 200
    assert engine.stop() is True
    assert engine.stop() is False


def test_reset_from_running_returns_to_idle():
    engine, clock = make_engine()
    engine.start()
    clock.advance(700)
    engine.record_lap()
    engine.reset()
    assert engine.phase == TimerPhase.IDLE
    assert not engine.running
    assert engine.elapsed == 0
    assert engine.laps == ()

    engine.start()
    clock.advance(400)
    lap = engine.record_lap()
    assert (lap.number, lap.time, lap.split_time) == (1, 400, 400)


def test_stop_reports_completed_run():
    runs = []
    clock = ManualClock()
    engine = TimerEngine(clock=clock, on_complete=runs.append)
    engine.start()
    clock.advance(1234)
    engine.record_lap()
    engine.stop()
    engine.reset()

    assert len(runs) == 1
    assert runs[0].elapsed == 1234
    assert runs[0].laps[0].split_time == 1234
    assert runs[0].running is False


def test_logged_flag_clears_on_start_and_reset():
    engine, clock = make_engine()
    assert not engine.can_log()
    engine.start()
    clock.advance(500)
    engine.stop()
    assert engine.can_log()
    engine.mark_logged()
    assert engine.has_logged
    assert not engine.can_log()

    engine.start()
    assert not engine.has_logged
    engine.mark_logged()
    engine.reset()
    assert not engine.has_logged


def test_elapsed_never_decreases_while_running():
    engine, clock = make_engine()
    engine.start()
    readings = []
    for step in (3, 0, 10, 7, 0, 1):
        clock.advance(step)
        readings.append(engine.tick())
    assert readings == sorted(readings)
    assert readings[-1] == 21


def test_random_operation_sequences_keep_laps_contiguous():
    rng = random.Random(1234)
    engine, clock = make_engine()
    recorded = 0
    for _ in range(500):
        clock.advance(rng.randint(0, 400))
        op = rng.choice(["start", "stop", "lap", "lap", "lap", "reset"])
        if op == "start":
            engine.start()
        elif op == "stop":
            engine.stop()
        elif op == "lap":
            if engine.record_lap() is not None:
                recorded += 1
        else:
            engine.reset()
            recorded = 0

        laps = engine.laps
        assert [lap.number for lap in laps] == list(range(1, recorded + 1))
        if laps:
            assert sum(lap.split_time for lap in laps) == laps[-1].time


def test_reset_while_running_skips_completion_hook():
    runs = []
    clock = ManualClock()
    engine = TimerEngine(clock=clock, on_complete=runs.append)
    engine.start()
    clock.advance(800)
    engine.reset()
    assert runs == []
    assert engine.phase == TimerPhase.IDLE
