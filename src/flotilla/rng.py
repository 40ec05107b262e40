from __future__ import annotations

import random

from pygame.math import Vector2


class DeterministicRng:
    """Seeded random stream shared by the evolution engine, clock and agents.

    ``reset`` rewinds the stream to the configured seed, so every caller that
    resets it restarts the same sequence of draws.
    """

    def __init__(self, seed: int):
        self._seed = seed
        self._random = random.Random(seed)

    @property
    def seed(self) -> int:
        return self._seed

    def reset(self) -> None:
        self._random.seed(self._seed)

    def next_float(self) -> float:
        return self._random.random()

    def next_range(self, low: float, high: float) -> float:
        return self._random.uniform(low, high)

    def next_percent(self) -> float:
        return self._random.uniform(0.0, 100.0)

    def next_unit_circle(self) -> Vector2:
        vector = Vector2()
        vector.from_polar((1, self._random.uniform(0.0, 360.0)))
        return vector
