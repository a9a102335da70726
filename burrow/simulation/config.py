"""Config — load simulation parameters from YAML files.

All tunable constants (map size, starting colony, forage rates, pacing)
live in YAML and are parsed into a typed dataclass here.  Game rules that
are part of the design itself (need decay, work times, build costs) stay
in their own modules.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)


@dataclass
class SimulationConfig:
    """Top-level simulation configuration.

    Attributes:
        seed: RNG seed for deterministic replay.
        world_width: Number of grid columns.
        world_height: Number of grid rows.
        generate_terrain: Generate rock, trees and water; when False the
            map starts as plain grass.
        starting_colonists: Colonists spawned by ``start()``.
        starting_day: Calendar day at game start.
        starting_hour: Hour of day at game start.
        forage_spawn_interval: Simulated seconds between forage rolls.
        forage_spawn_chance: Probability that a forage roll spawns food.
        forage_spawn_attempts: Random tiles tried per successful roll.
        max_messages: Size of the message log.
        move_cooldown: Seconds between path steps at full speed.
        work_ticks_per_second: Work-ticks earned per second at speed 1.0.
        require_materials: If True, a build whose materials are missing at
            completion is abandoned; if False it is built anyway and the
            materials are only consumed when available.
        log_level: Logging level name used by the CLI.
    """

    seed: int = 12345
    world_width: int = 64
    world_height: int = 48
    generate_terrain: bool = True

    # Colony
    starting_colonists: int = 3
    starting_day: int = 1
    starting_hour: int = 8

    # Forage
    forage_spawn_interval: float = 60.0
    forage_spawn_chance: float = 0.3
    forage_spawn_attempts: int = 50

    # Pacing
    max_messages: int = 10
    move_cooldown: float = 0.1
    work_ticks_per_second: float = 10.0

    require_materials: bool = False

    log_level: str = "INFO"

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Reject values the simulation cannot run with.

        Raises:
            ValueError: If a dimension, count or rate is out of range.
        """
        if self.world_width <= 0 or self.world_height <= 0:
            msg = f"world size must be positive, got {self.world_width}x{self.world_height}"
            raise ValueError(msg)
        if not 0.0 <= self.forage_spawn_chance <= 1.0:
            msg = f"forage_spawn_chance must be in [0, 1], got {self.forage_spawn_chance}"
            raise ValueError(msg)
        if self.starting_colonists < 0:
            msg = f"starting_colonists must be >= 0, got {self.starting_colonists}"
            raise ValueError(msg)
        if self.max_messages <= 0:
            msg = f"max_messages must be positive, got {self.max_messages}"
            raise ValueError(msg)

    @classmethod
    def from_yaml(cls, path: str | Path) -> SimulationConfig:
        """Load configuration from a YAML file.

        Keys missing from the file keep their defaults; unknown keys are
        logged and ignored.

        Args:
            path: Path to the YAML config file.

        Returns:
            A populated SimulationConfig instance.

        Raises:
            FileNotFoundError: If the config file does not exist.
            ValueError: If a loaded value is out of range.
        """
        path = Path(path)
        with path.open("r") as f:
            data = yaml.safe_load(f) or {}

        known = {f.name for f in fields(cls)}
        for key in sorted(set(data) - known):
            logger.warning("Ignoring unknown config key %r in %s", key, path)

        return cls(**{key: value for key, value in data.items() if key in known})
