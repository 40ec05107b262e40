from __future__ import annotations

from functools import cmp_to_key
from typing import List, Optional

from ...config import SpeciesConfig
from .agent import Individual
from .genome import Genome


def compare_fitness(a: Individual, b: Individual) -> int:
    """Order individuals by points, highest first."""
    if a.points > b.points:
        return -1
    if a.points < b.points:
        return 1
    return 0


_FITNESS_KEY = cmp_to_key(compare_fitness)


class Population:
    def __init__(self, species: SpeciesConfig):
        self.species = species
        self.individuals: List[Individual] = []
        self.parent_count = 0
        self.parents: List[Individual] = []
        self.last_winner: Optional[Individual] = None
        self.last_winner_genome: Optional[Genome] = None

    @property
    def name(self) -> str:
        return self.species.name

    def __len__(self) -> int:
        return len(self.individuals)

    def clean_up(self) -> int:
        before = len(self.individuals)
        self.individuals = [individual for individual in self.individuals if not individual.removed]
        return before - len(self.individuals)

    def rank(self) -> List[Individual]:
        self.clean_up()
        self.individuals.sort(key=_FITNESS_KEY)
        return self.individuals

    def active(self) -> List[Individual]:
        self.clean_up()
        return [individual for individual in self.individuals if individual.active]

    def sleep(self) -> None:
        for individual in self.individuals:
            individual.sleep()

    def clean_up_and_sleep(self) -> None:
        self.clean_up()
        self.sleep()
