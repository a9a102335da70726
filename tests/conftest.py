"""Shared fixtures for the Burrow test suite."""

from __future__ import annotations

import numpy as np
import pytest
from numpy.random import Generator

from burrow.colony.colonist import Colonist, Skills
from burrow.colony.traits import Trait
from burrow.simulation.config import SimulationConfig
from burrow.simulation.engine import SimulationEngine
from burrow.simulation.events import RecordingEventSink
from burrow.simulation.ids import IdSequence
from burrow.world.world import Position, World


@pytest.fixture
def rng() -> Generator:
    """A deterministic random generator for reproducible tests."""
    return np.random.default_rng(seed=12345)


@pytest.fixture
def ids() -> IdSequence:
    return IdSequence()


@pytest.fixture
def small_world() -> World:
    """A small 8x8 all-grass world for fast tests."""
    return World(width=8, height=8)


@pytest.fixture
def default_config() -> SimulationConfig:
    """Default simulation config (no YAML file needed)."""
    return SimulationConfig()


@pytest.fixture
def flat_config() -> SimulationConfig:
    """A 16x16 grass map with no starting colonists and no forage."""
    return SimulationConfig(
        seed=7,
        world_width=16,
        world_height=16,
        generate_terrain=False,
        starting_colonists=0,
        forage_spawn_chance=0.0,
    )


@pytest.fixture
def engine(flat_config: SimulationConfig) -> SimulationEngine:
    """A started engine on a flat map that records emitted events."""
    eng = SimulationEngine(config=flat_config, events=RecordingEventSink())
    eng.start()
    return eng


def make_plain(colonist: Colonist) -> Colonist:
    """Strip randomness from a spawned colonist: skill 1 everywhere, neutral work trait."""
    colonist.skills = Skills()
    colonist.trait = Trait.OPTIMIST
    return colonist


@pytest.fixture
def add_colonist(engine: SimulationEngine):
    """Factory adding a plain colonist to ``engine`` at a position."""

    def _add(pos: Position, name: str = "Tess") -> Colonist:
        return make_plain(engine.add_colonist(pos, name=name))

    return _add
