from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, List

from pygame.math import Vector2

from ..core.genome import Category, Genome
from ..utils.math2d import _planar_forward

if TYPE_CHECKING:
    from ...rng import DeterministicRng
    from ..core.context import WorldQuery


@dataclass(slots=True)
class AgentDirection:
    direction: Vector2
    utility: float


def score_direction(
    world: WorldQuery,
    rng: DeterministicRng,
    genome: Genome,
    position: Vector2,
    direction: Vector2,
    sight_factor: float = 1.0,
) -> AgentDirection:
    low, high = genome.random_range
    utility = rng.next_range(low, high)
    reach = genome.sight * sight_factor
    hit = world.cast_ray(position, direction, reach)
    if hit is not None:
        category = Category.from_tag(hit.tag)
        if category is not None:
            # 1 when touching, 0 at the edge of sight
            distance_index = 1.0 - hit.distance / reach
            weights = genome.weights_for(category)
            utility = distance_index * weights.distance_factor + weights.weight
    return AgentDirection(direction=Vector2(direction), utility=utility)


def sample_directions(
    world: WorldQuery,
    rng: DeterministicRng,
    genome: Genome,
    position: Vector2,
    forward: Vector2,
    forward_sight_factor: float = 1.5,
) -> List[AgentDirection]:
    """Cast the sensing fan around ``forward`` and score every ray.

    The fan starts opposite the forward heading and sweeps ``ray_radius + 1``
    rays ``steps`` degrees apart. One longer ray straight ahead is appended.
    """
    forward = _planar_forward(forward)
    steps = genome.steps
    ray_direction = forward.rotate(-steps * (genome.ray_radius / 2.0))
    directions: List[AgentDirection] = []
    for _ in range(genome.ray_radius + 1):
        directions.append(score_direction(world, rng, genome, position, ray_direction))
        ray_direction = ray_direction.rotate(steps)
    directions.append(score_direction(world, rng, genome, position, forward, forward_sight_factor))
    return directions
