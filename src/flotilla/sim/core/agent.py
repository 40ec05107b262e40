from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from pygame.math import Vector2

from .genome import Genome


class LifecycleState(str, Enum):
    ACTIVE = "Active"
    ASLEEP = "Asleep"
    REMOVED = "Removed"


@dataclass(slots=True)
class Individual:
    id: int
    species: str
    genome: Genome
    position: Vector2 = field(default_factory=Vector2)
    heading: Vector2 = field(default_factory=lambda: Vector2(0.0, 1.0))
    velocity: Vector2 = field(default_factory=Vector2)
    radius: float = 1.0
    points: float = 0.0
    state: LifecycleState = LifecycleState.ASLEEP

    @property
    def active(self) -> bool:
        return self.state == LifecycleState.ACTIVE

    @property
    def removed(self) -> bool:
        return self.state == LifecycleState.REMOVED

    def initialize(self, genome: Genome) -> None:
        """Take on ``genome`` as a newborn and start acting."""
        self.genome = genome
        self.points = 0.0
        self.state = LifecycleState.ACTIVE

    def sleep(self) -> None:
        if self.removed:
            return
        self.state = LifecycleState.ASLEEP
        self.velocity.update(0.0, 0.0)

    def remove(self) -> None:
        self.state = LifecycleState.REMOVED
        self.velocity.update(0.0, 0.0)
