"""Periodic asyncio task that drives :meth:`TimerEngine.tick`."""

from __future__ import annotations

import asyncio
import contextlib
import inspect
from typing import Any, Callable, Optional

from loguru import logger

from .engine import TimerEngine


class TimerTicker:
    """Ticks the engine every ``interval_ms`` while it is running.

    Cancelling the task is the only way to stop ticking; each tick is a short,
    non-blocking update so there is nothing to drain.
    """

    def __init__(
        self,
        engine: TimerEngine,
        interval_ms: float = 10.0,
        on_tick: Optional[Callable[[int], Any]] = None,
    ):
        self.engine = engine
        self.interval_ms = float(interval_ms)
        self.on_tick = on_tick
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        if self.running:
            return
        self._task = asyncio.get_running_loop().create_task(self._loop())
        logger.debug("Ticker started with interval {}ms", self.interval_ms)

    async def stop(self) -> None:
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        logger.debug("Ticker stopped")

    async def _loop(self) -> None:
        while True:
            if self.engine.running:
                elapsed = self.engine.tick()
                if self.on_tick is not None:
                    result = self.on_tick(elapsed)
                    if inspect.isawaitable(result):
                        await result
            await asyncio.sleep(self.interval_ms / 1000.0)


__all__ = ["TimerTicker"]
