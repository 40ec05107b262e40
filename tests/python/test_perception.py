from __future__ import annotations

from pygame.math import Vector2
from pytest import approx

from flotilla.rng import DeterministicRng
from flotilla.sim.core.context import Hit
from flotilla.sim.core.genome import CategoryWeights, Genome
from flotilla.sim.systems.perception import sample_directions, score_direction


def _genome(**overrides) -> Genome:
    values = dict(
        ray_radius=20,
        sight=10.0,
        moving_speed=6.0,
        random_direction_value=(0.2, 0.2),
        boat=CategoryWeights(1.0, 2.0),
        pirate=CategoryWeights(-3.0, -1.0),
    )
    values.update(overrides)
    return Genome(**values)


def test_fan_covers_full_circle_plus_forward_ray(stub_world):
    world = stub_world()
    genome = _genome()
    forward = Vector2(0.0, 1.0)

    directions = sample_directions(world, DeterministicRng(1), genome, Vector2(), forward)

    assert genome.steps == 18
    assert len(directions) == genome.ray_radius + 2
    first = directions[0].direction
    assert first.x == approx(0.0, abs=1e-9)
    assert first.y == approx(-1.0)
    for previous, current in zip(directions[:-2], directions[1:-1]):
        assert previous.direction.angle_to(current.direction) % 360.0 == approx(18.0)
    assert directions[-1].direction == forward
    assert [call[2] for call in world.calls[:-1]] == [approx(10.0)] * (genome.ray_radius + 1)
    assert world.calls[-1][2] == approx(15.0)


def test_forward_sight_factor_extends_last_ray(stub_world):
    world = stub_world()

    sample_directions(world, DeterministicRng(1), _genome(), Vector2(), Vector2(1.0, 0.0), forward_sight_factor=2.0)

    assert world.calls[-1][2] == approx(20.0)
    assert world.calls[-1][1] == Vector2(1.0, 0.0)


def test_zero_heading_falls_back_to_default_forward(stub_world):
    directions = sample_directions(stub_world(), DeterministicRng(1), _genome(), Vector2(), Vector2())
    assert directions[-1].direction == Vector2(0.0, 1.0)


def test_miss_scores_baseline(stub_world):
    direction = score_direction(stub_world(), DeterministicRng(4), _genome(), Vector2(), Vector2(1.0, 0.0))
    assert direction.utility == approx(0.2)


def test_recognized_hit_uses_distance_index(stub_world):
    world = stub_world(lambda origin, direction, reach: Hit(distance=5.0, tag="boat"))

    direction = score_direction(world, DeterministicRng(4), _genome(), Vector2(), Vector2(1.0, 0.0))

    # half of sight away: 0.5 * 2.0 + 1.0
    assert direction.utility == approx(2.0)


def test_hit_at_contact_gives_full_distance_factor(stub_world):
    world = stub_world(lambda origin, direction, reach: Hit(distance=0.0, tag="pirate"))

    direction = score_direction(world, DeterministicRng(4), _genome(), Vector2(), Vector2(1.0, 0.0))

    assert direction.utility == approx(-4.0)


def test_unrecognized_tag_keeps_baseline(stub_world):
    world = stub_world(lambda origin, direction, reach: Hit(distance=1.0, tag="rock"))

    direction = score_direction(world, DeterministicRng(4), _genome(), Vector2(), Vector2(1.0, 0.0))

    assert direction.utility == approx(0.2)


def test_baseline_is_drawn_even_when_a_hit_overrides_it(stub_world):
    genome = _genome(random_direction_value=(0.0, 1.0))
    hitting = stub_world(lambda origin, direction, reach: Hit(distance=5.0, tag="boat"))
    rng_a = DeterministicRng(9)
    rng_b = DeterministicRng(9)

    score_direction(hitting, rng_a, genome, Vector2(), Vector2(1.0, 0.0))
    score_direction(stub_world(), rng_b, genome, Vector2(), Vector2(1.0, 0.0))

    assert rng_a.next_float() == rng_b.next_float()


def test_sampling_is_deterministic_for_a_seed(stub_world):
    genome = _genome(random_direction_value=(0.0, 1.0))
    utilities = []
    for _ in range(2):
        directions = sample_directions(stub_world(), DeterministicRng(21), genome, Vector2(3.0, 4.0), Vector2(0.0, 1.0))
        utilities.append([direction.utility for direction in directions])
    assert utilities[0] == utilities[1]
