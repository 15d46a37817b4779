from __future__ import annotations

import asyncio
import contextlib
import json
from dataclasses import asdict
from typing import List, Literal, Optional, Set

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from lift import Building, BuildingConfig, Call, LiftError, Simulation


class DispatcherSelection(BaseModel):
    name: str


class CallRequest(BaseModel):
    origin_floor: int
    direction: Literal["up", "down"]
    destination_floor: int


class BuildingSettings(BaseModel):
    num_floors: int = 10
    bottom_floor: int = 1
    num_cars: int = 2
    starting_floors: Optional[List[int]] = None
    visit_recording: Literal["every_floor", "service_stops"] = "every_floor"
    dispatcher: str = "load_balance"
    starvation_ticks: Optional[int] = 10


class SimulationManager:
    def __init__(self, config: Optional[BuildingConfig] = None, tick_interval: float = 1.0) -> None:
        self.simulation = Simulation(Building(config=config or BuildingConfig(num_cars=2)))
        self.tick_interval = tick_interval
        self.clients: Set[WebSocket] = set()
        self._task: Optional[asyncio.Task] = None
        self._lock = asyncio.Lock()

    async def start(self) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        if self._task:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None

    async def _run(self) -> None:
        while True:
            async with self._lock:
                self.simulation.step()
                payload = self.current_state()
            await self.broadcast(payload)
            await asyncio.sleep(self.tick_interval)

    async def broadcast(self, payload: dict) -> None:
        message = json.dumps(payload)
        disconnected: Set[WebSocket] = set()
        for client in set(self.clients):
            try:
                await client.send_text(message)
            except WebSocketDisconnect:
                disconnected.add(client)
        for client in disconnected:
            await self.unregister(client)

    async def register(self, websocket: WebSocket) -> None:
        await websocket.accept()
        self.clients.add(websocket)
        await websocket.send_text(json.dumps(self.current_state()))

    async def unregister(self, websocket: WebSocket) -> None:
        if websocket in self.clients:
            self.clients.remove(websocket)
        with contextlib.suppress(Exception):
            await websocket.close()

    def current_state(self) -> dict:
        metrics = asdict(self.simulation.metrics.snapshot(self.simulation.current_time))
        return {
            "time": self.simulation.current_time,
            "building": self.simulation.building.snapshot(),
            "metrics": metrics,
            "dispatcher": self.simulation.building.dispatcher_name,
        }

    async def place_call(self, request: CallRequest) -> dict:
        async with self._lock:
            call = self.simulation.place_call(
                Call(request.origin_floor, request.direction, request.destination_floor)
            )
            state = self.current_state()
            state["call"] = call.to_dict()
            return state

    async def set_dispatcher(self, name: str) -> dict:
        async with self._lock:
            self.simulation.building.set_dispatcher(name)
            return self.current_state()

    async def reset(self, settings: Optional[BuildingSettings]) -> dict:
        async with self._lock:
            config = BuildingConfig.from_dict(settings.model_dump()) if settings else None
            self.simulation.reset(config)
            return self.current_state()


manager = SimulationManager()
app = FastAPI(title="Lift SCAN Dispatch API")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def on_startup() -> None:
    await manager.start()


@app.on_event("shutdown")
async def on_shutdown() -> None:
    await manager.stop()


@app.get("/state")
async def get_state() -> dict:
    return manager.current_state()


@app.post("/calls")
async def place_call(request: CallRequest) -> dict:
    try:
        return await manager.place_call(request)
    except LiftError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@app.post("/dispatcher")
async def set_dispatcher(selection: DispatcherSelection) -> dict:
    try:
        return await manager.set_dispatcher(selection.name)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@app.post("/reset")
async def reset(settings: Optional[BuildingSettings] = None) -> dict:
    try:
        return await manager.reset(settings)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@app.websocket("/ws/stream")
async def websocket_endpoint(websocket: WebSocket) -> None:
    await manager.register(websocket)
    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        await manager.unregister(websocket)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("server.app:app", host="0.0.0.0", port=8000, reload=False)
