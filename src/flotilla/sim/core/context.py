from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Protocol

from pygame.math import Vector2

from ...config import SimulationConfig
from ...rng import DeterministicRng
from .genome import Genome

if TYPE_CHECKING:
    from ...config import SpeciesConfig
    from .agent import Individual


@dataclass(frozen=True, slots=True)
class Hit:
    distance: float
    tag: Optional[str]


class WorldQuery(Protocol):
    def cast_ray(self, origin: Vector2, direction: Vector2, max_distance: float) -> Optional[Hit]: ...


class Spawner(Protocol):
    def regenerate(self, species: SpeciesConfig) -> List[Individual]: ...

    def regenerate_resources(self) -> None: ...


class MovementSink(Protocol):
    def apply_movement(self, individual: Individual, heading: Vector2, speed: float) -> None: ...


class CheckpointSink(Protocol):
    def save_checkpoint(self, genome: Genome, label: str) -> None: ...


class SimulationContext:
    """Everything a subsystem needs from the running simulation.

    Built once per run and handed to the engine, clock and per-agent
    pipeline; nothing reaches for global state.
    """

    def __init__(
        self,
        config: SimulationConfig,
        world: WorldQuery,
        spawner: Spawner,
        movement: MovementSink,
        checkpoints: Optional[CheckpointSink] = None,
        rng: Optional[DeterministicRng] = None,
    ):
        self.config = config
        self.rng = rng if rng is not None else DeterministicRng(config.seed)
        self.world = world
        self.spawner = spawner
        self.movement = movement
        self.checkpoints = checkpoints
