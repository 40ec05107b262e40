from __future__ import annotations

from dataclasses import replace
from typing import TYPE_CHECKING

from ..core.genome import Category, CategoryWeights, Genome
from ..utils.math2d import _clamp_value

if TYPE_CHECKING:
    from ...config import EvolutionConfig, GenomeLimits
    from ...rng import DeterministicRng


def max_ray_radius(limits: GenomeLimits) -> int:
    # beyond this the derived steps would drop under its floor
    return max(limits.ray_radius, 360 // max(1, limits.steps))


def clamp_ray_radius(ray_radius: int, limits: GenomeLimits) -> int:
    return int(_clamp_value(ray_radius, limits.ray_radius, max_ray_radius(limits)))


def mutate(genome: Genome, rng: DeterministicRng, evolution: EvolutionConfig) -> Genome:
    """Return a mutated copy of ``genome``.

    Every gene gets its own trial at ``mutation_chance`` percent and, on
    success, a uniform delta in ``[-mutation_factor, +mutation_factor]``.
    Sensing geometry, sight and speed are clamped to their floors; sight and
    speed trade off against each other when either one grows.
    """
    factor = evolution.mutation_factor
    chance = evolution.mutation_chance
    limits = evolution.limits

    def _trial() -> bool:
        return rng.next_percent() <= chance

    def _delta() -> float:
        return rng.next_range(-factor, factor)

    ray_radius = genome.ray_radius
    if _trial():
        steps = max(genome.steps + int(_delta()), limits.steps)
        ray_radius = 360 // steps
    if _trial():
        ray_radius += int(_delta())
    ray_radius = clamp_ray_radius(ray_radius, limits)

    sight = genome.sight
    moving_speed = genome.moving_speed
    if _trial():
        sight_increase = _delta()
        sight = max(sight + sight_increase, limits.sight)
        if sight_increase > 0.0:
            moving_speed -= sight_increase * evolution.sight_to_speed_influence
            moving_speed = max(moving_speed, limits.moving_speed)
    if _trial():
        speed_increase = _delta()
        moving_speed = max(moving_speed + speed_increase, limits.moving_speed)
        if speed_increase > 0.0:
            sight -= speed_increase * evolution.speed_to_sight_influence
            sight = max(sight, limits.sight)
    sight = max(sight, limits.sight)
    moving_speed = max(moving_speed, limits.moving_speed)

    def _drift(value: float) -> float:
        if _trial():
            return value + _delta()
        return value

    low, high = genome.random_direction_value
    random_direction_value = (_drift(low), _drift(high))
    weights = {}
    for category in Category:
        current = genome.weights_for(category)
        weights[category.value] = CategoryWeights(
            weight=_drift(current.weight),
            distance_factor=_drift(current.distance_factor),
        )

    return replace(
        genome,
        ray_radius=ray_radius,
        sight=sight,
        moving_speed=moving_speed,
        random_direction_value=random_direction_value,
        **weights,
    )
