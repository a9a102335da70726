"""Building — construction rules, material accounting and zone registries.

Walls, floors and doors change the terrain of the tile they are built on.
Beds and stockpiles leave the terrain alone and are tracked in their own
registries (``Bed`` and ``Stockpile`` records held by the engine).

Every structure except a stockpile must be built on FLOOR, so the colony
has to floor an area before it can erect anything on it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from burrow.economy.items import ItemType, count_in_stockpiles
from burrow.world.pathfinding import manhattan
from burrow.world.tile import TileType

if TYPE_CHECKING:
    from burrow.simulation.ids import IdSequence
    from burrow.world.world import Position, World


class BuildType(Enum):
    """Structures a colonist can construct."""

    WALL = "WALL"
    FLOOR = "FLOOR"
    DOOR = "DOOR"
    BED = "BED"
    STOCKPILE = "STOCKPILE"


BUILD_COSTS: dict[BuildType, dict[ItemType, int]] = {
    BuildType.WALL: {ItemType.STONE: 2},
    BuildType.FLOOR: {ItemType.STONE: 1},
    BuildType.DOOR: {ItemType.WOOD: 1},
    BuildType.BED: {ItemType.WOOD: 2},
    BuildType.STOCKPILE: {},
}

_TERRAIN_RESULT: dict[BuildType, TileType | None] = {
    BuildType.WALL: TileType.WALL,
    BuildType.FLOOR: TileType.FLOOR,
    BuildType.DOOR: TileType.DOOR,
    BuildType.BED: None,
    BuildType.STOCKPILE: None,
}


@dataclass
class Stockpile:
    """A zone of tiles where hauled items are stored.

    Attributes:
        id: Unique identifier.
        tiles: Member positions, in designation order.
    """

    id: str
    tiles: list[Position] = field(default_factory=list)


@dataclass
class Bed:
    """A placed bed.

    Attributes:
        id: Unique identifier.
        pos: Tile the bed stands on.
        occupied_by: Id of the colonist using it, if any.
    """

    id: str
    pos: Position
    occupied_by: str | None = None


# -- Construction --


def can_build(world: World, x: int, y: int, build_type: BuildType) -> bool:
    """Return True if ``build_type`` may be placed at ``(x, y)``.

    Stockpiles go on GRASS or FLOOR; everything else needs FLOOR.
    """
    tile = world.tile_at(x, y)
    if tile is None:
        return False
    if build_type is BuildType.STOCKPILE:
        return tile.type in (TileType.GRASS, TileType.FLOOR)
    return tile.type is TileType.FLOOR


def build(world: World, x: int, y: int, build_type: BuildType) -> bool:
    """Apply a finished structure to the terrain.

    Beds and stockpiles pass the terrain check but change nothing here;
    the caller registers them.

    Returns:
        False (no mutation) if ``can_build`` rejects the placement.
    """
    if not can_build(world, x, y, build_type):
        return False
    terrain = _TERRAIN_RESULT[build_type]
    if terrain is not None:
        world.set_tile_type(x, y, terrain)
    return True


def build_cost(build_type: BuildType) -> dict[ItemType, int]:
    """Return the full material bill, with zero for unused item types."""
    cost = {item_type: 0 for item_type in ItemType}
    cost.update(BUILD_COSTS[build_type])
    return cost


# -- Materials --


def has_materials(
    world: World,
    stockpiles: list[Stockpile],
    cost: dict[ItemType, int],
) -> bool:
    """Return True if the stockpiles together cover ``cost``."""
    return all(
        count_in_stockpiles(world, stockpiles, item_type) >= required
        for item_type, required in cost.items()
        if required > 0
    )


def consume_materials(
    world: World,
    stockpiles: list[Stockpile],
    cost: dict[ItemType, int],
) -> bool:
    """Debit ``cost`` from stockpiled stacks.

    Stacks are drained greedily, stockpile by stockpile and tile by tile.
    Emptied stacks are removed from the map.  Nothing is consumed unless
    the whole bill can be paid.

    Returns:
        True if the materials were consumed.
    """
    if not has_materials(world, stockpiles, cost):
        return False

    for item_type, required in cost.items():
        remaining = required
        for stockpile in stockpiles:
            for x, y in stockpile.tiles:
                if remaining <= 0:
                    break
                item = world.item_at(x, y)
                if item is None or item.type is not item_type:
                    continue
                take = min(item.quantity, remaining)
                item.quantity -= take
                remaining -= take
                if item.quantity <= 0:
                    world.remove_item(x, y)
    return True


# -- Stockpiles --


def create_stockpile(ids: IdSequence, tiles: list[Position]) -> Stockpile:
    return Stockpile(id=ids.next("stockpile"), tiles=list(tiles))


def is_in_stockpile(stockpiles: list[Stockpile], pos: Position) -> bool:
    return any(pos in stockpile.tiles for stockpile in stockpiles)


def find_nearest_stockpile_space(
    world: World,
    stockpiles: list[Stockpile],
    pos: Position,
) -> Position | None:
    """Return the Manhattan-nearest empty stockpile tile.

    Ties go to the first tile encountered, stockpile by stockpile.
    """
    nearest: Position | None = None
    nearest_dist = -1
    for stockpile in stockpiles:
        for tile_pos in stockpile.tiles:
            if world.item_at(*tile_pos) is not None:
                continue
            dist = manhattan(tile_pos, pos)
            if nearest is None or dist < nearest_dist:
                nearest, nearest_dist = tile_pos, dist
    return nearest


# -- Beds --


def create_bed(ids: IdSequence, pos: Position) -> Bed:
    return Bed(id=ids.next("bed"), pos=pos)


def occupy_bed(bed: Bed, colonist_id: str) -> None:
    bed.occupied_by = colonist_id


def vacate_bed(bed: Bed) -> None:
    bed.occupied_by = None


def bed_at(beds: list[Bed], pos: Position) -> Bed | None:
    return next((bed for bed in beds if bed.pos == pos), None)


def find_nearest_available_bed(beds: list[Bed], pos: Position) -> Bed | None:
    """Return the Manhattan-nearest unoccupied bed, first found on ties."""
    nearest: Bed | None = None
    for bed in beds:
        if bed.occupied_by is not None:
            continue
        if nearest is None or manhattan(bed.pos, pos) < manhattan(nearest.pos, pos):
            nearest = bed
    return nearest
