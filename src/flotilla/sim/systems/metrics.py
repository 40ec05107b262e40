from __future__ import annotations

from typing import Sequence

from ..core.agent import Individual
from ..core.population import Population
from ..types.metrics import GenerationMetrics


def create_generation_metrics(
    generation: int,
    population: Population,
    ranked: Sequence[Individual],
) -> GenerationMetrics:
    survivors = len(ranked)
    winner = ranked[0] if ranked else None
    mean_points = sum(individual.points for individual in ranked) / survivors if survivors else 0.0
    genome = winner.genome if winner is not None else None
    return GenerationMetrics(
        generation=generation,
        species=population.name,
        survivors=survivors,
        winner_points=winner.points if winner is not None else 0.0,
        mean_points=mean_points,
        parent_count=population.parent_count,
        winner_sight=genome.sight if genome is not None else 0.0,
        winner_speed=genome.moving_speed if genome is not None else 0.0,
        winner_ray_radius=genome.ray_radius if genome is not None else 0,
    )
