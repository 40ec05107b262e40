from __future__ import annotations

import pytest
from pygame.math import Vector2

from flotilla.sim.systems.decision import choose_direction, rank_directions
from flotilla.sim.systems.perception import AgentDirection


class FixedRng:
    def __init__(self, value: float):
        self.value = value
        self.draws = 0

    def next_float(self) -> float:
        self.draws += 1
        return self.value


def _directions(*utilities: float) -> list[AgentDirection]:
    return [AgentDirection(direction=Vector2(float(index), 1.0), utility=u) for index, u in enumerate(utilities)]


def test_rank_orders_by_utility_descending():
    ranked = rank_directions(_directions(0.1, 3.0, -2.0, 1.5))
    assert [candidate.utility for candidate in ranked] == [3.0, 1.5, 0.1, -2.0]


def test_rank_keeps_emission_order_on_ties():
    directions = _directions(1.0, 2.0, 1.0, 2.0)
    ranked = rank_directions(directions)
    assert ranked == [directions[1], directions[3], directions[0], directions[2]]


def test_roll_within_chance_takes_best():
    directions = _directions(0.5, 4.0, 2.0)
    assert choose_direction(directions, FixedRng(0.85)) is directions[1]


def test_roll_above_chance_takes_runner_up():
    directions = _directions(0.5, 4.0, 2.0)
    assert choose_direction(directions, FixedRng(0.86)) is directions[2]


def test_chance_is_configurable():
    directions = _directions(0.5, 4.0, 2.0)
    assert choose_direction(directions, FixedRng(0.5), max_utility_choice_chance=0.25) is directions[2]


def test_single_candidate_skips_the_roll():
    rng = FixedRng(0.99)
    directions = _directions(1.0)
    assert choose_direction(directions, rng) is directions[0]
    assert rng.draws == 0


def test_empty_sample_is_rejected():
    with pytest.raises(ValueError):
        choose_direction([], FixedRng(0.0))
