from __future__ import annotations

from enum import Enum
from typing import List, Optional

from loguru import logger

from ..systems.evolution import EvolutionEngine
from ..systems.steering import decide_and_act
from ..types.metrics import GenerationMetrics
from .context import SimulationContext
from .population import Population


class ClockState(str, Enum):
    STOPPED = "Stopped"
    RUNNING = "Running"


class SimulationClock:
    """Drives episodes and synchronized generation turnover for every species."""

    def __init__(self, context: SimulationContext, engine: Optional[EvolutionEngine] = None):
        self._context = context
        self._engine = engine if engine is not None else EvolutionEngine(context)
        self.populations: List[Population] = [Population(species) for species in context.config.species]
        self.state = ClockState.STOPPED
        self.generation = context.config.initial_generation
        self.elapsed = 0.0
        self.history: List[GenerationMetrics] = []

    @property
    def running(self) -> bool:
        return self.state == ClockState.RUNNING

    @property
    def engine(self) -> EvolutionEngine:
        return self._engine

    def population(self, name: str) -> Population:
        for population in self.populations:
            if population.name == name:
                return population
        raise KeyError(name)

    def start(self) -> None:
        context = self._context
        context.rng.reset()
        context.spawner.regenerate_resources()
        for population in self.populations:
            self._engine.regenerate(population)
        self.elapsed = 0.0
        self.state = ClockState.RUNNING
        logger.info(f"[clock] Started at generation {self.generation} with seed {context.rng.seed}")

    def resume(self) -> List[GenerationMetrics]:
        metrics = self.turnover()
        self.state = ClockState.RUNNING
        logger.info(f"[clock] Resumed at generation {self.generation}")
        return metrics

    def stop(self) -> None:
        for population in self.populations:
            population.clean_up_and_sleep()
        if self.state != ClockState.STOPPED:
            logger.info(f"[clock] Stopped at generation {self.generation}")
        self.state = ClockState.STOPPED

    def tick(self, dt: float) -> List[GenerationMetrics]:
        """Advance one tick. Returns the metrics of a turnover, if one happened."""
        if not self.running:
            return []
        metrics: List[GenerationMetrics] = []
        if self.elapsed >= self._context.config.episode_duration:
            self.generation += 1
            metrics = self.turnover()
            # absorbs this tick so the next episode starts at zero
            self.elapsed = -dt
        else:
            self._decide(dt)
        self.elapsed += dt
        return metrics

    def turnover(self) -> List[GenerationMetrics]:
        context = self._context
        context.rng.reset()
        context.spawner.regenerate_resources()
        metrics = [self._engine.turnover(population, self.generation) for population in self.populations]
        self.history.extend(metrics)
        logger.info(
            f"[clock] Generation {self.generation} winners: "
            + ", ".join(f"{entry.species} {entry.winner_points:.2f} points" for entry in metrics)
        )
        return metrics

    def _decide(self, dt: float) -> None:
        context = self._context
        for population in self.populations:
            for individual in population.active():
                decide_and_act(context, individual, dt)
