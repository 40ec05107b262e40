from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Set, Tuple

from pygame.math import Vector2

from ...config import ResourceConfig, SimulationConfig, SpeciesConfig
from ...rng import DeterministicRng
from ...spatial_grid import SpatialGrid
from ..systems.interactions import RuleTable, apply_contact, build_rule_table
from ..utils.math2d import _ray_circle_distance, _safe_normalize
from .agent import Individual
from .context import Hit
from .genome import Genome


@dataclass(slots=True)
class Resource:
    id: int
    tag: str
    position: Vector2
    radius: float
    removed: bool = False

    def remove(self) -> None:
        self.removed = True


class Arena:
    """Square world of circular bodies.

    Answers ray queries, spawns species and resources, integrates movement
    and turns body contacts into points through the interaction rules.
    """

    def __init__(self, config: SimulationConfig, rng: DeterministicRng):
        self._config = config
        self._rng = rng
        self._grid = SpatialGrid(config.cell_size)
        self._rules: RuleTable = build_rule_table(config)
        self._individuals: Dict[str, List[Individual]] = {species.name: [] for species in config.species}
        self._resources: Dict[str, List[Resource]] = {}
        self._default_genomes: Dict[str, Genome] = {
            species.name: Genome.from_config(species.genome) for species in config.species
        }
        self._contacts: Set[Tuple[int, int]] = set()
        self._candidates: list = []
        self._grid_dirty = True
        self._next_id = 0

    @property
    def individuals(self) -> List[Individual]:
        return [
            individual
            for species in self._config.species
            for individual in self._individuals.get(species.name, [])
            if not individual.removed
        ]

    @property
    def resources(self) -> List[Resource]:
        return [resource for group in self._resources.values() for resource in group if not resource.removed]

    # world query

    def cast_ray(self, origin: Vector2, direction: Vector2, max_distance: float) -> Optional[Hit]:
        direction = _safe_normalize(direction)
        if direction.length_squared() == 0.0 or max_distance <= 0.0:
            return None
        self._ensure_grid()
        half = max_distance * 0.5
        center = Vector2(origin.x + direction.x * half, origin.y + direction.y * half)
        candidates = self._candidates
        self._grid.collect_bodies(center, half, candidates)
        nearest: Optional[Hit] = None
        for body in candidates:
            if self._is_removed(body):
                continue
            distance = _ray_circle_distance(origin, direction, body.position, body.radius, max_distance)
            if distance is None:
                continue
            if nearest is None or distance < nearest.distance:
                nearest = Hit(distance=distance, tag=self._tag(body))
        candidates.clear()
        return nearest

    # spawner

    def regenerate(self, species: SpeciesConfig) -> List[Individual]:
        for previous in self._individuals.get(species.name, []):
            previous.remove()
        x0, y0, x1, y1 = species.spawn_area
        genome = self._default_genomes.get(species.name) or Genome.from_config(species.genome)
        spawned: List[Individual] = []
        for _ in range(species.population_size):
            position = Vector2(self._rng.next_range(x0, x1), self._rng.next_range(y0, y1))
            spawned.append(
                Individual(
                    id=self._allocate_id(),
                    species=species.name,
                    genome=genome,
                    position=position,
                    heading=self._rng.next_unit_circle(),
                    radius=species.body_radius,
                )
            )
        self._individuals[species.name] = spawned
        self._grid_dirty = True
        return spawned

    def regenerate_resources(self) -> None:
        self._resources.clear()
        for resource in self._config.resources:
            self._resources.setdefault(resource.tag, []).extend(self._spawn_resources(resource))
        self._grid_dirty = True

    def add_resource(self, tag: str, position: Vector2, radius: float = 0.5) -> Resource:
        """Place one resource by hand, outside the configured spawns. Used to build fixed scenes."""
        resource = Resource(id=self._allocate_id(), tag=tag, position=Vector2(position), radius=radius)
        self._resources.setdefault(tag, []).append(resource)
        self._grid_dirty = True
        return resource

    def invalidate(self) -> None:
        """Rebuild spatial buckets on the next query; needed after moving bodies by hand."""
        self._grid_dirty = True

    # movement sink

    def apply_movement(self, individual: Individual, heading: Vector2, speed: float) -> None:
        direction = _safe_normalize(heading)
        individual.velocity.update(direction.x * speed, direction.y * speed)

    # physics

    def step(self, dt: float) -> int:
        """Move every active individual and resolve new contacts. Returns how many bodies were destroyed."""
        world_size = self._config.world_size
        for individual in self.individuals:
            if not individual.active:
                continue
            x = individual.position.x + individual.velocity.x * dt
            y = individual.position.y + individual.velocity.y * dt
            x, y = self._reflect(x, y, world_size)
            individual.position.update(x, y)
        self._grid_dirty = True
        destroyed = self._resolve_contacts()
        self._prune()
        return destroyed

    def _resolve_contacts(self) -> int:
        self._ensure_grid()
        touching: Set[Tuple[int, int]] = set()
        doomed: Dict[int, Individual | Resource] = {}
        candidates = self._candidates
        for individual in self.individuals:
            if not individual.active:
                continue
            self._grid.collect_bodies(individual.position, individual.radius, candidates, exclude_id=individual.id)
            for other in candidates:
                if self._is_removed(other):
                    continue
                pair = (individual.id, other.id)
                touching.add(pair)
                if pair in self._contacts:
                    continue
                if apply_contact(self._rules, individual, other):
                    doomed[other.id] = other
            candidates.clear()
        # both sides of every new contact have scored before anything is removed
        for body in doomed.values():
            body.remove()
        self._contacts = touching
        return len(doomed)

    def _prune(self) -> None:
        for name, group in self._individuals.items():
            self._individuals[name] = [individual for individual in group if not individual.removed]
        for tag, group in self._resources.items():
            self._resources[tag] = [resource for resource in group if not resource.removed]

    def _spawn_resources(self, resource: ResourceConfig) -> List[Resource]:
        x0, y0, x1, y1 = resource.spawn_area
        return [
            Resource(
                id=self._allocate_id(),
                tag=resource.tag,
                position=Vector2(self._rng.next_range(x0, x1), self._rng.next_range(y0, y1)),
                radius=resource.radius,
            )
            for _ in range(resource.count)
        ]

    def _ensure_grid(self) -> None:
        if not self._grid_dirty:
            return
        self._grid.clear()
        for individual in self.individuals:
            self._grid.insert(individual)
        for resource in self.resources:
            self._grid.insert(resource)
        self._grid_dirty = False

    def _allocate_id(self) -> int:
        body_id = self._next_id
        self._next_id += 1
        return body_id

    @staticmethod
    def _is_removed(body: Individual | Resource) -> bool:
        return body.removed

    @staticmethod
    def _tag(body: Individual | Resource) -> str:
        if isinstance(body, Individual):
            return body.species
        return body.tag

    @staticmethod
    def _reflect(x: float, y: float, world_size: float) -> tuple[float, float]:
        while True:
            crossed = False
            if x < 0:
                x = -x
                crossed = True
            if x > world_size:
                x = 2 * world_size - x
                crossed = True
            if y < 0:
                y = -y
                crossed = True
            if y > world_size:
                y = 2 * world_size - y
                crossed = True
            if not crossed:
                break
        return x, y
