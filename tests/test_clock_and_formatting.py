from __future__ import annotations

import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from swimtime.timing.clock import ManualClock, MonotonicClock
from swimtime.utils.formatting import format_delta, format_time


def test_manual_clock_only_moves_forward():
    clock = ManualClock(100)
    assert clock.advance(50) == 150
    clock.set(200)
    assert clock.now_ms() == 200
    with pytest.raises(ValueError):
        clock.advance(-1)
    with pytest.raises(ValueError):
        clock.set(10)


def test_monotonic_clock_is_non_decreasing():
    clock = MonotonicClock()
    first = clock.now_ms()
    assert clock.now_ms() >= first


def test_format_time():
    assert format_time(0) == "00:00.00"
    assert format_time(64250) == "01:04.25"
    assert format_time(3599999) == "59:59.99"
    assert format_time(605) == "00:00.60"


def test_format_delta():
    assert format_delta(1500) == "-00:01.50"
    assert format_delta(-250) == "+00:00.25"
    assert format_delta(0) == "00:00.00"
