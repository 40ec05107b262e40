from __future__ import annotations

from typing import TYPE_CHECKING

from pygame.math import Vector2

from ..core.agent import Individual
from ..utils.math2d import _planar_forward, _signed_angle
from .decision import choose_direction
from .perception import AgentDirection, sample_directions

if TYPE_CHECKING:
    from ..core.context import SimulationContext


def turn_towards(heading: Vector2, target: Vector2, blend: float) -> Vector2:
    # fixed fraction per tick, so the turn rate depends on the tick rate
    current = _planar_forward(heading)
    wanted = _planar_forward(target)
    return current.rotate(_signed_angle(current, wanted) * blend)


def steer(context: SimulationContext, individual: Individual, choice: AgentDirection) -> None:
    behaviour = context.config.behaviour
    individual.heading = turn_towards(individual.heading, choice.direction, behaviour.rotation_blend)
    context.movement.apply_movement(individual, choice.direction, individual.genome.moving_speed)


def decide_and_act(context: SimulationContext, individual: Individual, dt: float) -> AgentDirection | None:
    if not individual.active:
        return None
    behaviour = context.config.behaviour
    directions = sample_directions(
        context.world,
        context.rng,
        individual.genome,
        individual.position,
        individual.heading,
        behaviour.forward_sight_factor,
    )
    choice = choose_direction(directions, context.rng, behaviour.max_utility_choice_chance)
    steer(context, individual, choice)
    return choice
