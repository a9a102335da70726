"""Colonist — an autonomous settler with needs, skills and a trait.

The colonist object only knows about itself: its needs decay, it can be
fed, rested, hurt and healed, and it reports how fast it works and walks.
Choosing what to do and removing the dead are the simulation loop's job.

State machine::

    IDLE -> WORKING  (task assigned)    -> IDLE (task finished or cleared)
    IDLE -> EATING   (food reserved)    -> IDLE (meal finished)
    IDLE -> SLEEPING (rest too low)     -> IDLE (rest back at 100)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from burrow.colony.task import TaskType
from burrow.colony.traits import TRAIT_MODIFIERS, Trait

if TYPE_CHECKING:
    from numpy.random import Generator

    from burrow.simulation.ids import IdSequence
    from burrow.world.world import Position

# -- Constants ---------------------------------------------------------------

NEED_MAX = 100.0
MIN_SKILL = 1
MAX_SKILL = 20

HUNGER_DECAY = 0.5  # per simulated second
REST_DECAY = 0.3
MOOD_DECAY = 0.1
STARVATION_DAMAGE = 1.0  # health lost per second while hunger is 0

THRESHOLD_GOOD = 75
THRESHOLD_OKAY = 50
THRESHOLD_BAD = 25

_SKILL_BONUS = 0.05  # work speed per skill level
_LOW_MOOD_PENALTY = 0.5
_EXHAUSTED_MOVE_SPEED = 0.5

COLONIST_NAMES = (
    "Nira", "Josk", "Val", "Bram", "Petra",
    "Kira", "Thom", "Alia", "Dex", "Yara",
    "Finn", "Mira", "Ryn", "Cade", "Lira",
)


class ColonistState(Enum):
    """What a colonist is currently doing."""

    IDLE = "IDLE"
    WORKING = "WORKING"
    EATING = "EATING"
    SLEEPING = "SLEEPING"
    MOVING = "MOVING"


class Need(Enum):
    """Need meters; values name the matching ``Needs`` attribute."""

    HEALTH = "health"
    HUNGER = "hunger"
    REST = "rest"
    MOOD = "mood"


@dataclass
class Needs:
    """Need meters, each in [0, 100] (health may exceed 100 for TOUGH)."""

    health: float = 100.0
    hunger: float = 100.0
    rest: float = 100.0
    mood: float = 75.0


@dataclass
class Skills:
    """Skill levels, each in [1, 20]."""

    mining: int = MIN_SKILL
    construction: int = MIN_SKILL
    farming: int = MIN_SKILL
    cooking: int = MIN_SKILL
    combat: int = MIN_SKILL

    @classmethod
    def random(cls, rng: Generator) -> Skills:
        """Draw every skill uniformly from [MIN_SKILL, MAX_SKILL]."""
        levels = rng.integers(MIN_SKILL, MAX_SKILL + 1, size=5)
        return cls(*(int(level) for level in levels))


def skill_for_task(task_type: TaskType) -> str | None:
    """Return the ``Skills`` attribute that speeds up ``task_type``."""
    match task_type:
        case TaskType.MINE:
            return "mining"
        case TaskType.BUILD:
            return "construction"
        case TaskType.COOK:
            return "cooking"
        case _:
            return None


def need_status(value: float) -> str:
    """Classify a need value as good / okay / bad / critical."""
    if value >= THRESHOLD_GOOD:
        return "good"
    if value >= THRESHOLD_OKAY:
        return "okay"
    if value >= THRESHOLD_BAD:
        return "bad"
    return "critical"


@dataclass
class Colonist:
    """A single colonist.

    Attributes:
        id: Unique identifier.
        name: Display name (not necessarily unique).
        pos: Current tile.
        needs: Need meters.
        skills: Skill levels.
        trait: Personality modifier.
        state: Current state-machine state.
        current_task: Id of the task held while WORKING or EATING.
        path: Remaining route, starting at the current tile.
        move_cooldown: Seconds until the next step along ``path``.
    """

    id: str
    name: str
    pos: Position
    needs: Needs = field(default_factory=Needs)
    skills: Skills = field(default_factory=Skills)
    trait: Trait = Trait.OPTIMIST
    state: ColonistState = ColonistState.IDLE
    current_task: str | None = None
    path: list[Position] = field(default_factory=list)
    move_cooldown: float = 0.0

    @classmethod
    def spawn(
        cls,
        ids: IdSequence,
        pos: Position,
        rng: Generator,
        name: str | None = None,
    ) -> Colonist:
        """Create a colonist with random skills, trait and (optionally) name.

        Args:
            ids: The simulation's id sequence.
            pos: Spawn tile.
            rng: Seeded random generator.
            name: Fixed name; drawn from the roster when omitted.

        Returns:
            A new IDLE colonist with full needs.
        """
        skills = Skills.random(rng)
        traits = list(Trait)
        trait = traits[int(rng.integers(len(traits)))]
        if name is None:
            name = COLONIST_NAMES[int(rng.integers(len(COLONIST_NAMES)))]
        return cls(
            id=ids.next("colonist"),
            name=name,
            pos=pos,
            skills=skills,
            trait=trait,
        )

    # -- Needs --

    @property
    def max_health(self) -> float:
        return NEED_MAX * (1 + TRAIT_MODIFIERS[self.trait].health)

    def decay_needs(self, dt: float) -> None:
        """Apply ``dt`` seconds of need decay and starvation damage."""
        mood_decay = MOOD_DECAY * (1 - TRAIT_MODIFIERS[self.trait].mood)
        needs = self.needs
        needs.hunger = max(0.0, needs.hunger - HUNGER_DECAY * dt)
        needs.rest = max(0.0, needs.rest - REST_DECAY * dt)
        needs.mood = max(0.0, needs.mood - mood_decay * dt)
        if needs.hunger <= 0:
            self.damage(STARVATION_DAMAGE * dt)

    def satisfy_need(self, need: Need, amount: float) -> None:
        """Raise a need meter, capped at 100."""
        current = getattr(self.needs, need.value)
        setattr(self.needs, need.value, min(NEED_MAX, current + amount))

    def damage(self, amount: float) -> None:
        self.needs.health = max(0.0, self.needs.health - amount)

    def heal(self, amount: float) -> None:
        """Restore health up to the trait-adjusted maximum."""
        self.needs.health = min(self.max_health, self.needs.health + amount)

    def need_statuses(self) -> dict[Need, str]:
        return {need: need_status(getattr(self.needs, need.value)) for need in Need}

    @property
    def is_critical(self) -> bool:
        """Return True if health, hunger or rest is below the bad threshold."""
        return (
            self.needs.health < THRESHOLD_BAD
            or self.needs.hunger < THRESHOLD_BAD
            or self.needs.rest < THRESHOLD_BAD
        )

    @property
    def is_dead(self) -> bool:
        return self.needs.health <= 0

    @property
    def is_hungry(self) -> bool:
        return self.needs.hunger < THRESHOLD_OKAY

    @property
    def is_tired(self) -> bool:
        return self.needs.rest < THRESHOLD_BAD

    @property
    def is_idle(self) -> bool:
        return self.state is ColonistState.IDLE

    # -- Performance --

    def work_speed(self, task_type: TaskType) -> float:
        """Return the work-speed multiplier for ``task_type``.

        ``(1 + skill * 0.05 + trait bonus)``, halved when mood is at 0.
        """
        skill = skill_for_task(task_type)
        skill_bonus = getattr(self.skills, skill) * _SKILL_BONUS if skill else 0.0
        trait_bonus = TRAIT_MODIFIERS[self.trait].work
        mood_penalty = _LOW_MOOD_PENALTY if self.needs.mood <= 0 else 1.0
        return (1 + skill_bonus + trait_bonus) * mood_penalty

    def movement_speed(self) -> float:
        """Exhausted colonists (rest at 0) walk at half speed."""
        return _EXHAUSTED_MOVE_SPEED if self.needs.rest <= 0 else 1.0

    # -- Movement and tasks --

    def move_to(self, pos: Position) -> None:
        self.pos = pos

    def set_path(self, path: list[Position]) -> None:
        self.path = list(path)

    def clear_path(self) -> None:
        self.path = []

    def assign_task(self, task_id: str) -> None:
        self.current_task = task_id
        self.state = ColonistState.WORKING

    def clear_task(self) -> None:
        self.current_task = None
        self.state = ColonistState.IDLE
