"""Tile — a single square of the colony map.

Each tile holds its terrain, an optional pending work designation and at
most one item stack.  Everything else (stockpiles, beds) lives in separate
registries so the tile itself stays lightweight.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from burrow.colony.task import TaskType
    from burrow.economy.items import ItemStack


class TileType(Enum):
    """Terrain of a tile."""

    GRASS = "GRASS"
    ROCK = "ROCK"
    TREE = "TREE"
    WATER = "WATER"
    FLOOR = "FLOOR"
    WALL = "WALL"
    DOOR = "DOOR"


WALKABLE_TYPES: frozenset[TileType] = frozenset(
    {TileType.GRASS, TileType.FLOOR, TileType.DOOR},
)


@dataclass
class Tile:
    """A single tile in the world grid.

    Attributes:
        type: Terrain type.
        designation: Pending work marker (mine/chop), if any.
        item: The item stack lying on this tile, if any.
    """

    type: TileType = TileType.GRASS
    designation: TaskType | None = None
    item: ItemStack | None = None


def is_walkable(tile: Tile | None) -> bool:
    """Return True if colonists can stand on ``tile``.

    A missing tile (out of bounds) is never walkable.
    """
    if tile is None:
        return False
    return tile.type in WALKABLE_TYPES
