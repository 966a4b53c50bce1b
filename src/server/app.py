from __future__ import annotations

import asyncio
import contextlib
import json
import logging
from typing import Literal, Optional, Set

from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from simulation import AsyncioClock, ElevatorSystem, SystemConfig

MIN_FLOORS, MAX_FLOORS = 2, 24
MIN_CARS, MAX_CARS = 2, 12


class AlgorithmSelection(BaseModel):
    name: str


class ModeSelection(BaseModel):
    mode: Literal["automatic", "manual"]


class ConfigurationUpdate(BaseModel):
    num_floors: int = Field(ge=MIN_FLOORS, le=MAX_FLOORS)
    num_cars: int = Field(ge=MIN_CARS, le=MAX_CARS)


class CallRequest(BaseModel):
    floor: int = Field(ge=1)
    direction: Literal["up", "down"]


class AssignRequest(BaseModel):
    car_id: int


class MoveRequest(BaseModel):
    floor: int = Field(ge=1)


class BankManager:
    def __init__(self, num_floors: int = 10, num_cars: int = 3, tick_interval: float = 0.25) -> None:
        self.system = ElevatorSystem(
            SystemConfig(num_floors=num_floors, num_cars=num_cars),
            clock=AsyncioClock(),
        )
        self.tick_interval = tick_interval
        self.clients: Set[WebSocket] = set()
        self._task: Optional[asyncio.Task] = None

    async def start(self) -> None:
        if self._task is None:
            self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        if self._task:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
            self._task = None
        for car in self.system.cars:
            car.cancel()

    async def _run(self) -> None:
        while True:
            await self.broadcast(self.current_state())
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
        return self.system.snapshot()

    def require_car(self, car_id: int) -> None:
        if self.system.get_car(car_id) is None:
            raise HTTPException(status_code=404, detail=f"Unknown car {car_id}")


manager = BankManager()
app = FastAPI(title="Elevator Bank Simulation API")
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
async def create_call(request: CallRequest) -> dict:
    call = manager.system.call(request.floor, request.direction)
    if call is None:
        raise HTTPException(status_code=400, detail=f"Floor {request.floor} is not served")
    state = manager.current_state()
    state["call"] = call.as_dict()
    return state


@app.post("/calls/auto-assign")
async def auto_assign() -> dict:
    assigned = manager.system.auto_assign_all()
    state = manager.current_state()
    state["assigned"] = assigned
    return state


@app.post("/calls/{call_id}/assign")
async def assign_call(call_id: int, request: AssignRequest) -> dict:
    manager.require_car(request.car_id)
    if not manager.system.assign(call_id, request.car_id):
        raise HTTPException(status_code=404, detail=f"Unknown call {call_id}")
    return manager.current_state()


@app.post("/cars/{car_id}/move")
async def move_car(car_id: int, request: MoveRequest) -> dict:
    manager.require_car(car_id)
    accepted = manager.system.move_car(car_id, request.floor)
    state = manager.current_state()
    state["accepted"] = accepted
    return state


@app.post("/algorithm")
async def set_algorithm(selection: AlgorithmSelection) -> dict:
    try:
        manager.system.set_policy(selection.name)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return manager.current_state()


@app.post("/mode")
async def set_mode(selection: ModeSelection) -> dict:
    manager.system.set_mode(selection.mode)
    return manager.current_state()


@app.post("/configure")
async def configure(update: ConfigurationUpdate) -> dict:
    manager.system.configure(update.num_floors, update.num_cars)
    return manager.current_state()


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

    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    uvicorn.run("server.app:app", host="0.0.0.0", port=8000, reload=False)
