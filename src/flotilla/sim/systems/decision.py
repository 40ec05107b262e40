from __future__ import annotations

from typing import TYPE_CHECKING, List, Sequence

from .perception import AgentDirection

if TYPE_CHECKING:
    from ...rng import DeterministicRng


def rank_directions(directions: Sequence[AgentDirection]) -> List[AgentDirection]:
    # sorted() is stable with reverse=True, equal utilities keep emission order
    return sorted(directions, key=lambda candidate: candidate.utility, reverse=True)


def choose_direction(
    directions: Sequence[AgentDirection],
    rng: DeterministicRng,
    max_utility_choice_chance: float = 0.85,
) -> AgentDirection:
    """Pick the best direction, or the runner-up with the remaining chance."""
    if not directions:
        raise ValueError("Cannot choose a direction from an empty sample")
    ranked = rank_directions(directions)
    if len(ranked) == 1:
        return ranked[0]
    if rng.next_float() <= max_utility_choice_chance:
        return ranked[0]
    return ranked[1]
