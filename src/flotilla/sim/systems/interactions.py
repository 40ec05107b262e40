from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Dict, Mapping, Protocol

from ..core.agent import Individual
from ..core.genome import Category

if TYPE_CHECKING:
    from ...config import SimulationConfig


@dataclass(frozen=True, slots=True)
class InteractionRule:
    points: float
    destroy: bool = False


RuleTable = Dict[str, Dict[Category, InteractionRule]]


class Body(Protocol):
    @property
    def tag(self) -> str: ...

    def remove(self) -> None: ...


def build_rule_table(config: SimulationConfig) -> RuleTable:
    return {
        species.name: {
            Category(tag): InteractionRule(points=rule.points, destroy=rule.destroy)
            for tag, rule in species.rules.items()
        }
        for species in config.species
    }


def tag_of(other: Individual | Body) -> str:
    if isinstance(other, Individual):
        return other.species
    return other.tag


def apply_contact(rules: Mapping[str, Mapping[Category, InteractionRule]], individual: Individual, other) -> bool:
    """Score ``individual`` touching ``other`` without removing anything.

    Returns True when the matching rule destroys ``other``.
    """
    if not individual.active:
        return False
    category = Category.from_tag(tag_of(other))
    if category is None:
        return False
    rule = rules.get(individual.species, {}).get(category)
    if rule is None:
        return False
    individual.points += rule.points
    return rule.destroy


def resolve_contact(rules: Mapping[str, Mapping[Category, InteractionRule]], individual: Individual, other) -> bool:
    """Apply the rule for ``individual`` touching ``other``.

    Returns True when the contact destroyed ``other``.
    """
    if apply_contact(rules, individual, other):
        other.remove()
        return True
    return False
