import sys
from pathlib import Path

import pytest
from pygame.math import Vector2

ROOT = Path(__file__).resolve().parents[2]
src_root = ROOT / "src"
if str(src_root) not in sys.path:
    sys.path.insert(0, str(src_root))

from flotilla.config import SimulationConfig  # noqa: E402
from flotilla.sim.core.agent import Individual  # noqa: E402
from flotilla.sim.core.context import SimulationContext  # noqa: E402
from flotilla.sim.core.genome import Genome  # noqa: E402


def pytest_addoption(parser: pytest.Parser) -> None:
    parser.addoption(
        "--run-config-tests",
        action="store_true",
        default=False,
        help="run tests that are intended only for configuration changes",
    )


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "config_change: marks tests that should only run when configuration files change",
    )


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    if config.getoption("--run-config-tests"):
        return

    skip_marker = pytest.mark.skip(
        reason="Run only when configuration is modified (use --run-config-tests)",
    )

    for item in items:
        if "config_change" in item.keywords:
            item.add_marker(skip_marker)


class StubWorld:
    """World query answering every ray through ``respond(origin, direction, max_distance)``."""

    def __init__(self, respond=None):
        self._respond = respond
        self.calls = []

    def cast_ray(self, origin, direction, max_distance):
        self.calls.append((Vector2(origin), Vector2(direction), max_distance))
        if self._respond is None:
            return None
        return self._respond(origin, direction, max_distance)


class StubSpawner:
    def __init__(self):
        self.resource_regenerations = 0
        self.spawned = {}
        self._next_id = 0

    def regenerate(self, species):
        genome = Genome.from_config(species.genome)
        fresh = []
        for _ in range(species.population_size):
            fresh.append(Individual(id=self._next_id, species=species.name, genome=genome))
            self._next_id += 1
        self.spawned[species.name] = fresh
        return fresh

    def regenerate_resources(self):
        self.resource_regenerations += 1


class RecordingMovement:
    def __init__(self):
        self.commands = []

    def apply_movement(self, individual, heading, speed):
        self.commands.append((individual.id, Vector2(heading), speed))
        individual.velocity.update(heading.x * speed, heading.y * speed)


class RecordingCheckpoints:
    def __init__(self, error: Exception | None = None):
        self.saved = []
        self._error = error

    def save_checkpoint(self, genome, label):
        if self._error is not None:
            raise self._error
        self.saved.append((label, genome))


@pytest.fixture
def make_context():
    def _make(config=None, world=None, spawner=None, movement=None, checkpoints=None):
        return SimulationContext(
            config if config is not None else SimulationConfig(),
            world=world if world is not None else StubWorld(),
            spawner=spawner if spawner is not None else StubSpawner(),
            movement=movement if movement is not None else RecordingMovement(),
            checkpoints=checkpoints,
        )

    return _make


@pytest.fixture
def stub_world():
    return StubWorld


@pytest.fixture
def recording_checkpoints():
    return RecordingCheckpoints
