"""FastAPI application exposing the stopwatch, roster and history queries."""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException, Request, WebSocket, WebSocketDisconnect
from loguru import logger

from ..records.history import best_time, timeline
from ..records.schema import ClubSettings, Distance, Stroke, Swimmer
from ..runtime.session import SessionConfig, TimingSession
from ..store.base import SwimmerStore
from ..store.memory import InMemorySwimmerStore
from ..timing.clock import Clock
from ..timing.engine import TimerEngine
from ..timing.ticker import TimerTicker
from ..utils.formatting import format_time
from .broadcaster import Broadcaster
from .schemas import (
    BestTimeSummary,
    LapComparisonItem,
    LogTimeRequest,
    SwimmerCreate,
    TimelineItem,
    TimerSnapshot,
)


@dataclass
class ServeConfig:
    tick_interval_ms: float = 10.0
    tick_broadcast: bool = True
    seed_file: Optional[str] = None


class AppState:
    def __init__(self, config: ServeConfig, store: SwimmerStore, clock: Optional[Clock], session_config: SessionConfig):
        self.config = config
        self.broadcaster = Broadcaster()
        self.engine = TimerEngine(clock=clock)
        self.session = TimingSession(store, self.engine, session_config)
        self.ticker = TimerTicker(
            self.engine,
            interval_ms=config.tick_interval_ms,
            on_tick=self._on_tick if config.tick_broadcast else None,
        )
        self.loaded = False
        self._load_lock = asyncio.Lock()

    async def ensure_loaded(self) -> None:
        if self.loaded:
            return
        async with self._load_lock:
            if not self.loaded:
                await self.session.load()
                await self.session.store.subscribe(self._on_roster)
                self.loaded = True

    def timer_snapshot(self, changed: Optional[bool] = None) -> TimerSnapshot:
        elapsed = self.engine.tick()
        return TimerSnapshot(
            elapsed=elapsed,
            display=format_time(elapsed),
            running=self.engine.running,
            phase=self.engine.phase.value,
            laps=list(self.engine.laps),
            has_logged=self.engine.has_logged,
            changed=changed,
        )

    def publish_timer(self, action: str) -> None:
        payload = self.timer_snapshot().model_dump(mode="json", by_alias=True)
        self.broadcaster.publish({"type": "timer", "action": action, "timer": payload})

    def _on_tick(self, elapsed: int) -> None:
        self.broadcaster.publish({"type": "tick", "elapsed": elapsed, "display": format_time(elapsed)})

    def _on_roster(self, swimmers: List[Swimmer]) -> None:
        self.broadcaster.publish(
            {"type": "swimmers", "swimmers": [s.model_dump(mode="json", by_alias=True) for s in swimmers]}
        )


def _build_store(config: ServeConfig) -> SwimmerStore:
    if config.seed_file:
        return InMemorySwimmerStore.from_yaml(Path(config.seed_file))
    return InMemorySwimmerStore()


def create_app(
    config: Optional[ServeConfig] = None,
    store: Optional[SwimmerStore] = None,
    clock: Optional[Clock] = None,
    session_config: Optional[SessionConfig] = None,
) -> FastAPI:
    config = config or ServeConfig()
    state = AppState(config, store or _build_store(config), clock, session_config or SessionConfig())

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        await state.ensure_loaded()
        state.ticker.start()
        try:
            yield
        finally:
            await state.ticker.stop()
            state.session.close()

    app = FastAPI(title="Swim Club Timer API", lifespan=lifespan)
    app.state.runtime = state

    async def require_swimmer(swimmer_id: str) -> Swimmer:
        await state.ensure_loaded()
        swimmer = state.session.get_swimmer(swimmer_id)
        if swimmer is None:
            raise HTTPException(status_code=404, detail=f"Swimmer {swimmer_id} not found")
        return swimmer

    @app.get("/health")
    async def health() -> Dict[str, str]:
        return {"status": "ok"}

    # -- stopwatch -----------------------------------------------------

    @app.get("/timer", response_model=TimerSnapshot)
    async def get_timer() -> TimerSnapshot:
        return state.timer_snapshot()

    @app.post("/timer/start", response_model=TimerSnapshot)
    async def start_timer() -> TimerSnapshot:
        changed = state.engine.start()
        state.publish_timer("start")
        return state.timer_snapshot(changed)

    @app.post("/timer/stop", response_model=TimerSnapshot)
    async def stop_timer() -> TimerSnapshot:
        changed = state.engine.stop()
        state.publish_timer("stop")
        return state.timer_snapshot(changed)

    @app.post("/timer/lap", response_model=TimerSnapshot)
    async def record_lap() -> TimerSnapshot:
        changed = state.engine.record_lap() is not None
        if changed:
            state.publish_timer("lap")
        return state.timer_snapshot(changed)

    @app.post("/timer/reset", response_model=TimerSnapshot)
    async def reset_timer() -> TimerSnapshot:
        state.engine.reset()
        state.publish_timer("reset")
        return state.timer_snapshot(True)

    @app.post("/timer/log")
    async def log_time(payload: LogTimeRequest) -> Dict[str, Any]:
        await require_swimmer(payload.swimmer_id)
        session = state.session
        session.select_swimmer(payload.swimmer_id)
        session.select_event(payload.stroke or session.stroke, payload.distance or session.distance)
        record = await session.log_time()
        if record is None:
            raise HTTPException(status_code=409, detail="Time not logged")
        state.publish_timer("log")
        return {"status": "logged", "record": record.model_dump(mode="json", by_alias=True)}

    # -- roster --------------------------------------------------------

    @app.get("/swimmers", response_model=List[Swimmer])
    async def list_swimmers() -> List[Swimmer]:
        await state.ensure_loaded()
        return state.session.swimmers

    @app.post("/swimmers", response_model=Swimmer, status_code=201)
    async def create_swimmer(payload: SwimmerCreate) -> Swimmer:
        await state.ensure_loaded()
        if not payload.name.strip():
            raise HTTPException(status_code=400, detail="Swimmer name cannot be empty")
        swimmer = await state.session.create_swimmer(payload.name)
        if swimmer is None:
            raise HTTPException(status_code=503, detail="Failed to create swimmer")
        return swimmer

    @app.delete("/swimmers/{swimmer_id}")
    async def delete_swimmer(swimmer_id: str) -> Dict[str, str]:
        await require_swimmer(swimmer_id)
        if not await state.session.remove_swimmer(swimmer_id):
            raise HTTPException(status_code=503, detail="Failed to delete swimmer")
        return {"status": "deleted", "swimmer_id": swimmer_id}

    @app.get("/swimmers/{swimmer_id}/best", response_model=BestTimeSummary)
    async def get_best_time(
        swimmer_id: str,
        stroke: Optional[Stroke] = None,
        distance: Optional[Distance] = None,
    ) -> BestTimeSummary:
        swimmer = await require_swimmer(swimmer_id)
        best = best_time(swimmer.times, stroke, distance)
        return BestTimeSummary(
            swimmer_id=swimmer_id,
            stroke=stroke,
            distance=distance,
            best=best,
            display=format_time(best) if best is not None else None,
        )

    @app.get("/swimmers/{swimmer_id}/timeline", response_model=List[TimelineItem])
    async def get_timeline(swimmer_id: str, stroke: Stroke, distance: Distance) -> List[TimelineItem]:
        swimmer = await require_swimmer(swimmer_id)
        return [
            TimelineItem(record=entry.record, delta=entry.delta, is_personal_best=entry.is_personal_best)
            for entry in timeline(swimmer.times, stroke, distance)
        ]

    @app.get("/swimmers/{swimmer_id}/laps", response_model=List[LapComparisonItem])
    async def compare_current_laps(swimmer_id: str) -> List[LapComparisonItem]:
        swimmer = await require_swimmer(swimmer_id)
        state.session.select_swimmer(swimmer_id)
        return [
            LapComparisonItem(lap=lap, comparison=result, best_split=swimmer.best_lap_times.get(lap.number))
            for lap, result in state.session.lap_comparisons()
        ]

    # -- club settings -------------------------------------------------

    @app.get("/settings", response_model=ClubSettings)
    async def get_settings() -> ClubSettings:
        return await state.session.store.get_club_settings()

    @app.put("/settings", response_model=ClubSettings)
    async def put_settings(payload: ClubSettings) -> ClubSettings:
        if not await state.session.store.update_club_settings(payload):
            raise HTTPException(status_code=503, detail="Failed to update club settings")
        return payload

    @app.post("/settings/logo", response_model=ClubSettings)
    async def upload_logo(request: Request, filename: str) -> ClubSettings:
        data = await request.body()
        if not data:
            raise HTTPException(status_code=400, detail="No file selected")
        store = state.session.store
        url = await store.upload_file(filename, data)
        if url is None:
            raise HTTPException(status_code=503, detail="Failed to upload logo")
        settings = (await store.get_club_settings()).model_copy(update={"logo_url": url})
        if not await store.update_club_settings(settings):
            raise HTTPException(status_code=503, detail="Failed to update club settings")
        return settings

    # -- live stream ---------------------------------------------------

    @app.websocket("/ws/stream")
    async def ws_stream(socket: WebSocket):
        await socket.accept()
        await state.ensure_loaded()
        queue = await state.broadcaster.register()
        try:
            await socket.send_json(
                {
                    "type": "swimmers",
                    "swimmers": [s.model_dump(mode="json", by_alias=True) for s in state.session.swimmers],
                }
            )
            while True:
                payload = await queue.get()
                await socket.send_json(payload)
        except WebSocketDisconnect:
            logger.debug("Websocket client disconnected")
        finally:
            await state.broadcaster.unregister(queue)

    return app


__all__ = ["create_app", "ServeConfig", "AppState"]
