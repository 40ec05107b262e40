from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

import yaml

from .exceptions import ConfigError

CATEGORY_TAGS = ("box", "boat", "pirate", "police")
SPECIES_NAMES = ("boat", "pirate", "police")


@dataclass
class CategoryWeightsConfig:
    weight: float = 0.0
    distance_factor: float = 0.0


@dataclass
class GenomeConfig:
    ray_radius: int = 20
    sight: float = 10.0
    moving_speed: float = 6.0
    random_direction_value: tuple[float, float] = (0.0, 0.5)
    weights: Dict[str, CategoryWeightsConfig] = field(default_factory=dict)


@dataclass
class InteractionRuleConfig:
    points: float = 0.0
    destroy: bool = False


@dataclass
class SpeciesConfig:
    name: str = "boat"
    population_size: int = 20
    body_radius: float = 1.0
    spawn_area: tuple[float, float, float, float] = (0.0, 0.0, 100.0, 100.0)
    genome: GenomeConfig = field(default_factory=GenomeConfig)
    rules: Dict[str, InteractionRuleConfig] = field(default_factory=dict)


@dataclass
class ResourceConfig:
    tag: str = "box"
    count: int = 40
    radius: float = 0.5
    spawn_area: tuple[float, float, float, float] = (5.0, 5.0, 95.0, 95.0)


@dataclass
class GenomeLimits:
    steps: int = 5
    ray_radius: int = 10
    sight: float = 2.5
    moving_speed: float = 4.0


@dataclass
class EvolutionConfig:
    mutation_factor: float = 2.0
    mutation_chance: float = 15.0
    # applied to the other trait when sight or speed grows
    sight_to_speed_influence: float = 0.0125
    speed_to_sight_influence: float = 0.125
    limits: GenomeLimits = field(default_factory=GenomeLimits)


@dataclass
class BehaviourConfig:
    max_utility_choice_chance: float = 0.85
    rotation_blend: float = 0.1
    forward_sight_factor: float = 1.5


def _weights(**pairs: tuple[float, float]) -> Dict[str, CategoryWeightsConfig]:
    return {tag: CategoryWeightsConfig(weight=w, distance_factor=d) for tag, (w, d) in pairs.items()}


def default_species() -> List[SpeciesConfig]:
    return [
        SpeciesConfig(
            name="boat",
            population_size=20,
            body_radius=1.0,
            spawn_area=(10.0, 10.0, 40.0, 90.0),
            genome=GenomeConfig(
                ray_radius=20,
                sight=10.0,
                moving_speed=6.0,
                random_direction_value=(0.0, 0.5),
                weights=_weights(box=(0.6, 1.0), boat=(0.0, 0.0), pirate=(-1.5, -2.0), police=(0.3, 0.2)),
            ),
            rules={"box": InteractionRuleConfig(points=2.0, destroy=True)},
        ),
        SpeciesConfig(
            name="pirate",
            population_size=12,
            body_radius=1.0,
            spawn_area=(60.0, 10.0, 90.0, 90.0),
            genome=GenomeConfig(
                ray_radius=20,
                sight=12.0,
                moving_speed=5.5,
                random_direction_value=(0.0, 0.5),
                weights=_weights(box=(0.3, 0.5), boat=(1.0, 1.5), pirate=(0.0, 0.0), police=(-2.0, -2.0)),
            ),
            rules={
                "box": InteractionRuleConfig(points=0.1, destroy=True),
                "boat": InteractionRuleConfig(points=5.0, destroy=True),
                "police": InteractionRuleConfig(points=-120.0, destroy=False),
            },
        ),
        SpeciesConfig(
            name="police",
            population_size=6,
            body_radius=1.2,
            spawn_area=(40.0, 40.0, 60.0, 60.0),
            genome=GenomeConfig(
                ray_radius=24,
                sight=14.0,
                moving_speed=6.5,
                random_direction_value=(0.0, 0.5),
                weights=_weights(box=(0.0, 0.0), boat=(0.1, 0.1), pirate=(1.5, 2.0), police=(-0.2, -0.2)),
            ),
            rules={
                "pirate": InteractionRuleConfig(points=10.0, destroy=True),
                "boat": InteractionRuleConfig(points=3.5, destroy=True),
            },
        ),
    ]


@dataclass
class SimulationConfig:
    time_step: float = 1.0 / 50.0
    episode_duration: float = 30.0
    seed: int = 6
    initial_generation: int = 0
    world_size: float = 100.0
    cell_size: float = 5.0
    checkpoint_dir: Optional[str] = None
    config_version: str = "v1"
    species: List[SpeciesConfig] = field(default_factory=default_species)
    resources: List[ResourceConfig] = field(default_factory=lambda: [ResourceConfig()])
    evolution: EvolutionConfig = field(default_factory=EvolutionConfig)
    behaviour: BehaviourConfig = field(default_factory=BehaviourConfig)

    @staticmethod
    def from_yaml(path: Path) -> "SimulationConfig":
        data = yaml.safe_load(Path(path).read_text())
        return load_config(data or {})

    def species_named(self, name: str) -> SpeciesConfig:
        for species in self.species:
            if species.name == name:
                return species
        raise ConfigError(f"Unknown species: {name}")


def _pair(value: tuple[float, float] | list[float] | None, default: tuple[float, float]) -> tuple[float, float]:
    if isinstance(value, (tuple, list)) and len(value) == 2:
        return (float(value[0]), float(value[1]))
    return default


def _area(
    value: tuple[float, ...] | list[float] | None, default: tuple[float, float, float, float]
) -> tuple[float, float, float, float]:
    if value is None:
        return default
    if not isinstance(value, (tuple, list)) or len(value) != 4:
        raise ConfigError(f"spawn_area needs four numbers, got {value!r}")
    x0, y0, x1, y1 = (float(v) for v in value)
    return (x0, y0, x1, y1)


def _check_category(tag: str, where: str) -> str:
    if tag not in CATEGORY_TAGS:
        raise ConfigError(f"Unknown category '{tag}' in {where}")
    return tag


def _load_genome(raw: dict, default: GenomeConfig, where: str) -> GenomeConfig:
    weights = {tag: CategoryWeightsConfig(w.weight, w.distance_factor) for tag, w in default.weights.items()}
    for tag, pair in (raw.get("weights") or {}).items():
        _check_category(tag, where)
        if isinstance(pair, dict):
            weights[tag] = CategoryWeightsConfig(**pair)
        else:
            weight, distance_factor = _pair(pair, (0.0, 0.0))
            weights[tag] = CategoryWeightsConfig(weight=weight, distance_factor=distance_factor)
    return GenomeConfig(
        ray_radius=int(raw.get("ray_radius", default.ray_radius)),
        sight=float(raw.get("sight", default.sight)),
        moving_speed=float(raw.get("moving_speed", default.moving_speed)),
        random_direction_value=_pair(raw.get("random_direction_value"), default.random_direction_value),
        weights=weights,
    )


def _load_species(raw: dict, defaults: Dict[str, SpeciesConfig]) -> SpeciesConfig:
    name = raw.get("name")
    if name not in SPECIES_NAMES:
        raise ConfigError(f"Unknown species: {name!r}")
    default = defaults.get(name, SpeciesConfig(name=name))
    rules = dict(default.rules)
    if "rules" in raw:
        rules = {
            _check_category(tag, f"{name}.rules"): InteractionRuleConfig(**rule)
            for tag, rule in (raw.get("rules") or {}).items()
        }
    return SpeciesConfig(
        name=name,
        population_size=int(raw.get("population_size", default.population_size)),
        body_radius=float(raw.get("body_radius", default.body_radius)),
        spawn_area=_area(raw.get("spawn_area"), default.spawn_area),
        genome=_load_genome(raw.get("genome") or {}, default.genome, f"{name}.genome"),
        rules=rules,
    )


def load_config(raw: dict) -> SimulationConfig:
    defaults = {species.name: species for species in default_species()}
    species = default_species()
    if "species" in raw:
        species = [_load_species(entry, defaults) for entry in raw["species"]]
    names = [entry.name for entry in species]
    if len(set(names)) != len(names):
        raise ConfigError(f"Duplicate species in config: {names}")

    resources = [ResourceConfig()]
    if "resources" in raw:
        resources = []
        for entry in raw["resources"] or []:
            values = dict(entry)
            area = _area(values.pop("spawn_area", None), ResourceConfig().spawn_area)
            resources.append(ResourceConfig(spawn_area=area, **values))

    evolution_raw = dict(raw.get("evolution") or {})
    limits = GenomeLimits(**(evolution_raw.pop("limits", None) or {}))
    evolution = EvolutionConfig(limits=limits, **evolution_raw)
    if not 0.0 <= evolution.mutation_chance <= 100.0:
        raise ConfigError(f"mutation_chance must be within [0, 100], got {evolution.mutation_chance}")

    behaviour = BehaviourConfig(**(raw.get("behaviour") or {}))
    sim_values = {k: v for k, v in raw.items() if k not in {"species", "resources", "evolution", "behaviour"}}
    config = SimulationConfig(
        species=species,
        resources=resources,
        evolution=evolution,
        behaviour=behaviour,
        **sim_values,
    )
    if config.episode_duration <= 0.0:
        raise ConfigError(f"episode_duration must be positive, got {config.episode_duration}")
    if config.time_step <= 0.0:
        raise ConfigError(f"time_step must be positive, got {config.time_step}")
    return config
