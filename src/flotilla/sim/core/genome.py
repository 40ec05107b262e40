from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Optional

from ...exceptions import GenomeError

if TYPE_CHECKING:
    from ...config import GenomeConfig


class Category(str, Enum):
    BOX = "box"
    BOAT = "boat"
    PIRATE = "pirate"
    POLICE = "police"

    @classmethod
    def from_tag(cls, tag: Optional[str]) -> Optional["Category"]:
        if tag is None:
            return None
        try:
            return cls(tag)
        except ValueError:
            return None


@dataclass(frozen=True, slots=True)
class CategoryWeights:
    weight: float = 0.0
    distance_factor: float = 0.0


@dataclass(frozen=True, slots=True)
class Genome:
    """Heritable parameters of one agent.

    ``ray_radius`` is the number of fan samples minus one and ``steps`` the
    angle between them, so ``steps * ray_radius`` covers the full circle.
    """

    ray_radius: int
    sight: float
    moving_speed: float
    random_direction_value: tuple[float, float] = (0.0, 0.5)
    box: CategoryWeights = CategoryWeights()
    boat: CategoryWeights = CategoryWeights()
    pirate: CategoryWeights = CategoryWeights()
    police: CategoryWeights = CategoryWeights()

    def __post_init__(self) -> None:
        if self.ray_radius <= 0:
            raise GenomeError(f"ray_radius must be positive, got {self.ray_radius}")

    @property
    def steps(self) -> int:
        return 360 // self.ray_radius

    @property
    def random_range(self) -> tuple[float, float]:
        low, high = self.random_direction_value
        return (min(low, high), max(low, high))

    def weights_for(self, category: Category) -> CategoryWeights:
        return getattr(self, category.value)

    @classmethod
    def from_config(cls, config: GenomeConfig) -> "Genome":
        weights = {
            category.value: CategoryWeights(
                weight=config.weights[category.value].weight,
                distance_factor=config.weights[category.value].distance_factor,
            )
            for category in Category
            if category.value in config.weights
        }
        return cls(
            ray_radius=int(config.ray_radius),
            sight=float(config.sight),
            moving_speed=float(config.moving_speed),
            random_direction_value=(
                float(config.random_direction_value[0]),
                float(config.random_direction_value[1]),
            ),
            **weights,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "steps": self.steps,
            "ray_radius": self.ray_radius,
            "sight": self.sight,
            "moving_speed": self.moving_speed,
            "random_direction_value": list(self.random_direction_value),
            "weights": {
                category.value: {
                    "weight": self.weights_for(category).weight,
                    "distance_factor": self.weights_for(category).distance_factor,
                }
                for category in Category
            },
        }
