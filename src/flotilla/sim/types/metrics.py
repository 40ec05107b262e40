from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class GenerationMetrics:
    generation: int
    species: str
    survivors: int
    winner_points: float
    mean_points: float
    parent_count: int
    winner_sight: float
    winner_speed: float
    winner_ray_radius: int
