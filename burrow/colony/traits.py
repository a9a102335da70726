"""Traits — fixed personality modifiers, one per colonist.

A trait nudges a colonist's work speed, mood decay or health ceiling.
The modifier table covers every ``Trait`` member; adding a trait means
adding its row here.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Trait(Enum):
    """Personality archetypes."""

    HARDWORKER = "HARDWORKER"
    LAZY = "LAZY"
    OPTIMIST = "OPTIMIST"
    PESSIMIST = "PESSIMIST"
    TOUGH = "TOUGH"


@dataclass(frozen=True)
class TraitModifiers:
    """Numeric effects of a trait.

    Attributes:
        work: Added to the work-speed multiplier (0.2 = 20% faster).
        mood: Fraction of mood decay avoided (0.5 halves it, -0.5 makes it
            50% faster).
        health: Fractional bonus to maximum health.
    """

    work: float = 0.0
    mood: float = 0.0
    health: float = 0.0


TRAIT_MODIFIERS: dict[Trait, TraitModifiers] = {
    Trait.HARDWORKER: TraitModifiers(work=0.2),
    Trait.LAZY: TraitModifiers(work=-0.2),
    Trait.OPTIMIST: TraitModifiers(mood=0.5),
    Trait.PESSIMIST: TraitModifiers(mood=-0.5),
    Trait.TOUGH: TraitModifiers(health=0.25),
}
