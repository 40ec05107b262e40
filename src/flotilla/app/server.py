from __future__ import annotations

import asyncio
from dataclasses import asdict
from typing import Any, Dict

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from ..config import SimulationConfig
from ..sim.core.simulation import Simulation


class SimulationController:
    def __init__(self, config: SimulationConfig):
        self.config = config
        self.simulation = Simulation(config)
        self.tick = 0
        self.speed_multiplier = 1.0
        self._lock = asyncio.Lock()
        self._loop_task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self.simulation.clock.running

    async def ensure_loop(self) -> None:
        if self._loop_task is None:
            self._loop_task = asyncio.create_task(self._loop())

    async def start(self) -> None:
        async with self._lock:
            self.simulation.clock.start()
            self.tick = 0

    async def resume(self) -> None:
        async with self._lock:
            self.simulation.clock.resume()

    async def stop(self) -> None:
        async with self._lock:
            self.simulation.clock.stop()

    async def advance(self) -> None:
        async with self._lock:
            self.simulation.step()
            self.tick += 1

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.config.time_step / self.speed_multiplier)
            if not self.running:
                continue
            await self.advance()

    def status(self) -> Dict[str, Any]:
        clock = self.simulation.clock
        latest = clock.history[-len(clock.populations) :] if clock.history else []
        return {
            "running": self.running,
            "state": clock.state.value,
            "tick": self.tick,
            "generation": clock.generation,
            "elapsed": clock.elapsed,
            "populations": {population.name: len(population.active()) for population in clock.populations},
            "last_generation": [asdict(entry) for entry in latest],
        }


app = FastAPI(title="Flotilla Evolution Control")
controller = SimulationController(SimulationConfig())


@app.on_event("startup")
async def _startup() -> None:
    await controller.ensure_loop()


@app.get("/api/status")
async def status() -> JSONResponse:
    return JSONResponse(controller.status())


@app.post("/api/control/start")
async def start_simulation() -> JSONResponse:
    await controller.start()
    return JSONResponse({"running": controller.running, "generation": controller.simulation.clock.generation})


@app.post("/api/control/resume")
async def resume_simulation() -> JSONResponse:
    await controller.resume()
    return JSONResponse({"running": controller.running, "generation": controller.simulation.clock.generation})


@app.post("/api/control/stop")
async def stop_simulation() -> JSONResponse:
    await controller.stop()
    return JSONResponse({"running": controller.running})


@app.post("/api/control/speed")
async def set_speed(payload: dict) -> JSONResponse:
    speed = float(payload.get("multiplier", 1.0))
    controller.speed_multiplier = max(0.1, min(5.0, speed))
    return JSONResponse({"multiplier": controller.speed_multiplier})


__all__ = ["app", "controller"]
