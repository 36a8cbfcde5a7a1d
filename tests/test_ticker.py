from __future__ import annotations

import asyncio
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parents[1]))

from swimtime.timing.clock import ManualClock
from swimtime.timing.engine import TimerEngine
from swimtime.timing.ticker import TimerTicker


def test_ticker_updates_running_engine():
    clock = ManualClock()
    engine = TimerEngine(clock=clock)
    seen = []

    async def scenario():
        ticker = TimerTicker(engine, interval_ms=5, on_tick=seen.append)
        engine.start()
        clock.advance(250)
        ticker.start()
        assert ticker.running
        await asyncio.sleep(0.05)
        await ticker.stop()
        assert not ticker.running

    asyncio.run(scenario())
    assert engine.elapsed == 250
    assert seen and seen[-1] == 250


def test_ticker_idles_while_engine_stopped():
    engine = TimerEngine(clock=ManualClock())
    seen = []

    async def on_tick(elapsed):
        seen.append(elapsed)

    async def scenario():
        ticker = TimerTicker(engine, interval_ms=5, on_tick=on_tick)
        ticker.start()
        await asyncio.sleep(0.03)
        await ticker.stop()
        await ticker.stop()

    asyncio.run(scenario())
    assert seen == []
