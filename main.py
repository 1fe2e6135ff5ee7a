"""
Windowsill — A Shared Garden of Plant Pots

FastAPI application that owns the one authoritative world. The server ticks
growth and withering, validates every caretaker action, snapshots the world
to storage, and pushes the full state to every connected viewer.
"""

from __future__ import annotations

import asyncio
import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import APIRouter, Depends, FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from fastapi.requests import HTTPConnection
from fastapi.staticfiles import StaticFiles
from pydantic import ValidationError

from core.actions import ActionProcessor, ActionResult
from core.broadcast import BroadcastGateway
from core.config import GardenConfig
from core.persistence import PersistenceGateway
from core.simulation import SimulationClock
from core.world import World
from db.database import create_engine, create_session_factory, init_db, shutdown_db
from models.schemas import (
    ActionResultResponse,
    ClientMessage,
    GardenConfigResponse,
    PlantRequest,
    PotResponse,
    WorldResponse,
)

VERSION = "1.0.0"

# ── Logging ───────────────────────────────────────────────────────

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
)
logger = logging.getLogger("windowsill")


# ── Garden Assembly ───────────────────────────────────────────────

class Garden:
    """One world plus the components that tick, mutate, broadcast and persist it."""

    def __init__(self, config: GardenConfig, database_url: str | None = None):
        self.config = config
        self.engine = create_engine(database_url)
        self.persistence = PersistenceGateway(create_session_factory(self.engine), config)
        self.world: World | None = None
        self.clock: SimulationClock | None = None
        self.actions: ActionProcessor | None = None
        self.broadcaster: BroadcastGateway | None = None
        self._tasks: list[asyncio.Task] = []

    def assemble(self, world: World) -> None:
        self.world = world
        self.broadcaster = BroadcastGateway(world)
        self.clock = SimulationClock(world, self.config, self.broadcaster)
        self.actions = ActionProcessor(world)

    @property
    def running(self) -> bool:
        return bool(self._tasks) and all(not t.done() for t in self._tasks)

    async def start(self) -> None:
        await init_db(self.engine)
        self.assemble(await self.persistence.load())
        self._tasks = [
            asyncio.create_task(self.clock.run()),
            asyncio.create_task(self.persistence.run(self.world)),
        ]
        logger.info("One simulated day is currently %d seconds", round(self.config.day_length_ms / 1000))

    async def stop(self) -> None:
        for task in self._tasks:
            task.cancel()
        for task in self._tasks:
            try:
                await task
            except asyncio.CancelledError:
                pass
        self._tasks = []
        if self.world is not None:
            await self.persistence.save(self.world)
        await shutdown_db(self.engine)

    async def after_action(self, result: ActionResult) -> None:
        if result.ok:
            await self.broadcaster.broadcast_state()


def get_garden(conn: HTTPConnection) -> Garden:
    """FastAPI dependency for the app's garden (HTTP and WebSocket routes alike)."""
    return conn.app.state.garden


def _get_pot_or_404(garden: Garden, pot_id: int):
    pot = garden.world.get_pot(pot_id)
    if pot is None:
        raise HTTPException(status_code=404, detail="Pot not found")
    return pot


router = APIRouter()


# ══════════════════════════════════════════════════════════════════
# OBSERVING
# ══════════════════════════════════════════════════════════════════

@router.get("/world", response_model=WorldResponse, tags=["Observe"])
async def get_world(garden: Garden = Depends(get_garden)):
    """The whole windowsill, exactly as broadcast."""
    return garden.world.to_snapshot()


@router.get("/pots/{pot_id}", response_model=PotResponse, tags=["Observe"])
async def get_pot(pot_id: int, garden: Garden = Depends(get_garden)):
    return _get_pot_or_404(garden, pot_id).to_dict()


@router.get("/config", response_model=GardenConfigResponse, tags=["Observe"])
async def get_config(garden: Garden = Depends(get_garden)):
    """Constants the client must share with the server (day length for 'days dry' labels)."""
    return garden.config.client_view()


# ══════════════════════════════════════════════════════════════════
# CARETAKING
# ══════════════════════════════════════════════════════════════════

@router.post("/pots/{pot_id}/plant", response_model=ActionResultResponse,
             response_model_exclude_none=True, tags=["Caretaking"])
async def plant_pot(pot_id: int, req: PlantRequest, garden: Garden = Depends(get_garden)):
    """Plant a seed in an empty pot."""
    result = garden.actions.plant(pot_id, req.seed_type, req.name, req.caretaker)
    await garden.after_action(result)
    return result.to_dict()


@router.post("/pots/{pot_id}/water", response_model=ActionResultResponse,
             response_model_exclude_none=True, tags=["Caretaking"])
async def water_pot(pot_id: int, garden: Garden = Depends(get_garden)):
    result = garden.actions.water(pot_id)
    await garden.after_action(result)
    return result.to_dict()


@router.post("/pots/{pot_id}/clear", response_model=ActionResultResponse,
             response_model_exclude_none=True, tags=["Caretaking"])
async def clear_pot(pot_id: int, garden: Garden = Depends(get_garden)):
    result = garden.actions.clear(pot_id)
    await garden.after_action(result)
    return result.to_dict()


# ══════════════════════════════════════════════════════════════════
# REAL-TIME
# ══════════════════════════════════════════════════════════════════

@router.websocket("/ws/garden")
async def websocket_garden(websocket: WebSocket, garden: Garden = Depends(get_garden)):
    """Live windowsill: state pushes in, plant/water/clear requests out."""
    await websocket.accept()
    broadcaster = garden.broadcaster
    await broadcaster.connect(websocket)
    malformed = ActionResult("unknown", False, "malformed message").to_dict()
    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                break

            raw = message.get("text")
            if raw is None:
                await broadcaster.send(websocket, "actionResult", malformed)
                continue
            if raw == "ping":
                await broadcaster.send(websocket, "pong", {})
                continue

            try:
                msg = ClientMessage.model_validate_json(raw)
            except ValidationError:
                await broadcaster.send(websocket, "actionResult", malformed)
                continue

            result = garden.actions.dispatch(msg.event, msg.data)
            await broadcaster.send(websocket, "actionResult", result.to_dict())
            await garden.after_action(result)
    except WebSocketDisconnect:
        logger.debug("Viewer left the windowsill")
    finally:
        broadcaster.disconnect(websocket)


# ══════════════════════════════════════════════════════════════════
# SYSTEM
# ══════════════════════════════════════════════════════════════════

@router.get("/lifecycle/status", tags=["System"])
async def lifecycle_status(garden: Garden = Depends(get_garden)):
    return {
        "tick": garden.clock.tick_count,
        "lastTick": garden.world.last_tick,
        "observers": garden.broadcaster.observer_count,
        "saves": garden.persistence.save_count,
        "tickMs": garden.config.tick_ms,
        "saveEveryMs": garden.config.save_every_ms,
        "running": garden.running,
    }


@router.get("/", tags=["Root"])
async def root():
    return {
        "name": "Windowsill",
        "version": VERSION,
        "message": "Plant something, keep it watered, watch it grow together.",
        "endpoints": {
            "world": "GET /world",
            "plant": "POST /pots/{pot_id}/plant",
            "water": "POST /pots/{pot_id}/water",
            "clear": "POST /pots/{pot_id}/clear",
            "live": "WS /ws/garden",
            "docs": "GET /docs",
        },
    }


# ── App factory ───────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    garden: Garden = app.state.garden
    await garden.start()
    logger.info("The windowsill is open (%d pots)", garden.config.num_pots)
    yield
    await garden.stop()
    logger.info("The windowsill is closed.")


def create_app(
    config: GardenConfig | None = None,
    database_url: str | None = None,
    public_dir: str | Path | None = None,
) -> FastAPI:
    app = FastAPI(
        title="Windowsill",
        description="A shared, server-authoritative garden of plant pots.",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.garden = Garden(config or GardenConfig.from_env(), database_url)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router)

    public = Path(public_dir or os.getenv("WINDOWSILL_PUBLIC_DIR", Path(__file__).parent / "public"))
    if public.is_dir():
        app.mount("/static", StaticFiles(directory=public, html=True), name="static")
        logger.info("Serving client from %s", public)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "3000")))
