"""Fan-out of timer and roster events to websocket clients using asyncio queues."""

from __future__ import annotations

import asyncio
from typing import Any, Dict, List


class Broadcaster:
    def __init__(self, max_pending: int = 256):
        self.connections: List[asyncio.Queue] = []
        self.max_pending = max_pending

    async def register(self) -> asyncio.Queue:
        queue: asyncio.Queue = asyncio.Queue(maxsize=self.max_pending)
        self.connections.append(queue)
        return queue

    async def unregister(self, queue: asyncio.Queue) -> None:
        if queue in self.connections:
            self.connections.remove(queue)

    def publish(self, message: Dict[str, Any]) -> None:
        """Queue ``message`` for every client; a slow client loses its oldest pending message."""

        for queue in list(self.connections):
            if queue.full():
                queue.get_nowait()
            queue.put_nowait(message)


__all__ = ["Broadcaster"]
