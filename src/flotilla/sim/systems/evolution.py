from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Sequence

from loguru import logger

from ..core.agent import Individual
from ..core.population import Population
from ..types.metrics import GenerationMetrics
from .metrics import create_generation_metrics
from .mutation import mutate

if TYPE_CHECKING:
    from ..core.context import SimulationContext


def checkpoint_label(species: str, generation: int) -> str:
    return f"{species}-Gen-{generation}"


class EvolutionEngine:
    """Ranks a population by points, keeps its elite and breeds the next one."""

    def __init__(self, context: SimulationContext):
        self._context = context

    def rank_and_select(self, population: Population, generation: int = 0) -> Optional[List[Individual]]:
        """Rank the live set and pick this generation's parents.

        An empty population is refilled from species defaults and ``None`` is
        returned, since there is nobody to inherit from.
        """
        ranked = population.rank()
        if not ranked:
            logger.info(f"[evolution] No {population.name} survived, regenerating from defaults")
            population.parents = []
            self.regenerate(population)
            return None

        population.parent_count = min(population.parent_count + 1, len(ranked))
        population.parents = ranked[: population.parent_count]
        population.last_winner = ranked[0]
        population.last_winner_genome = ranked[0].genome
        self.save_winner(population, generation)
        return list(population.parents)

    def regenerate(self, population: Population, parents: Optional[Sequence[Individual]] = None) -> None:
        context = self._context
        spawned = context.spawner.regenerate(population.species)
        for individual in spawned:
            genome = individual.genome
            if parents:
                # offspring always inherit from the last elite parent
                genome = parents[-1].genome
            individual.initialize(mutate(genome, context.rng, context.config.evolution))
        population.individuals = list(spawned)
        logger.debug(
            f"[evolution] Regenerated {len(spawned)} {population.name} "
            f"({'from parent' if parents else 'from defaults'})"
        )

    def save_winner(self, population: Population, generation: int) -> None:
        sink = self._context.checkpoints
        if sink is None or population.last_winner_genome is None:
            return
        label = checkpoint_label(population.name, generation)
        try:
            sink.save_checkpoint(population.last_winner_genome, label)
        except Exception as exc:
            logger.warning(f"[checkpoint] Could not save {label}: {exc}")

    def turnover(self, population: Population, generation: int) -> GenerationMetrics:
        parents = self.rank_and_select(population, generation)
        if parents is None:
            return create_generation_metrics(generation, population, [])
        metrics = create_generation_metrics(generation, population, population.individuals)
        self.regenerate(population, parents)
        return metrics
