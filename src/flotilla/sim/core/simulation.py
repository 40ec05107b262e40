from __future__ import annotations

from typing import List, Optional

from ...checkpoints import YamlCheckpointSink
from ...config import SimulationConfig
from ...rng import DeterministicRng
from ..types.metrics import GenerationMetrics
from .clock import SimulationClock
from .context import CheckpointSink, SimulationContext
from .world import Arena


class Simulation:
    """Wires an Arena to the clock and runs the per-tick schedule."""

    def __init__(self, config: SimulationConfig, checkpoints: Optional[CheckpointSink] = None):
        self.config = config
        self.rng = DeterministicRng(config.seed)
        self.arena = Arena(config, self.rng)
        if checkpoints is None and config.checkpoint_dir:
            checkpoints = YamlCheckpointSink(config.checkpoint_dir)
        self.context = SimulationContext(
            config,
            world=self.arena,
            spawner=self.arena,
            movement=self.arena,
            checkpoints=checkpoints,
            rng=self.rng,
        )
        self.clock = SimulationClock(self.context)

    def step(self, dt: Optional[float] = None) -> List[GenerationMetrics]:
        dt = self.config.time_step if dt is None else dt
        if self.clock.running:
            self.arena.step(dt)
        return self.clock.tick(dt)
