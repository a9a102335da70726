"""World grid — the tile matrix the colony lives on.

The World owns tiles arranged in a 2D grid and provides the walkability,
designation and item-placement contract used by pathfinding, the economy
and the simulation loop.  None of these operations raise on bad input:
out-of-bounds coordinates and incompatible terrain are reported through
``False`` / ``None`` return values and leave the grid untouched.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from burrow.economy.items import MAX_STACK, ItemStack
from burrow.world.tile import Tile, TileType, is_walkable

if TYPE_CHECKING:
    from numpy.random import Generator

    from burrow.colony.task import TaskType

Position = tuple[int, int]

_BORDER = 3
_TREE_CHANCE = 0.12
_POOL_MARGIN = 5
_POOL_GROW_CHANCE = 0.7
_START_AREA_HALF = 5


@dataclass
class World:
    """A 2D grid world holding every tile of the map.

    Attributes:
        width: Number of columns in the grid.
        height: Number of rows in the grid.
        tiles: 2D list of Tile objects indexed as ``tiles[y][x]``.
    """

    width: int
    height: int
    tiles: list[list[Tile]] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        """Initialise the grid with plain grass."""
        self.tiles = [[Tile() for _ in range(self.width)] for _ in range(self.height)]

    def in_bounds(self, x: int, y: int) -> bool:
        """Return True if ``(x, y)`` lies inside the grid."""
        return 0 <= x < self.width and 0 <= y < self.height

    def tile_at(self, x: int, y: int) -> Tile | None:
        """Return the tile at ``(x, y)``, or None when out of bounds."""
        if not self.in_bounds(x, y):
            return None
        return self.tiles[y][x]

    def set_tile_type(self, x: int, y: int, tile_type: TileType) -> None:
        """Change the terrain at ``(x, y)``; out-of-bounds is ignored."""
        tile = self.tile_at(x, y)
        if tile is not None:
            tile.type = tile_type

    def is_walkable_at(self, x: int, y: int) -> bool:
        return is_walkable(self.tile_at(x, y))

    # -- Designations --

    def designate(self, x: int, y: int, kind: TaskType) -> bool:
        """Mark a tile for work.

        Mining requires ROCK and chopping requires TREE.  Any other work
        kind is accepted on any in-bounds tile.

        Returns:
            True if the designation was set.
        """
        from burrow.colony.task import TaskType

        tile = self.tile_at(x, y)
        if tile is None:
            return False
        if kind is TaskType.MINE and tile.type is not TileType.ROCK:
            return False
        if kind is TaskType.CHOP and tile.type is not TileType.TREE:
            return False
        tile.designation = kind
        return True

    def clear_designation(self, x: int, y: int) -> None:
        tile = self.tile_at(x, y)
        if tile is not None:
            tile.designation = None

    def designated_tiles(self, kind: TaskType) -> list[Position]:
        """Return every position carrying the given designation, row-major."""
        return [
            (x, y)
            for y, row in enumerate(self.tiles)
            for x, tile in enumerate(row)
            if tile.designation is kind
        ]

    # -- Items --

    def place_item(self, x: int, y: int, stack: ItemStack) -> bool:
        """Put an item stack on a tile.

        Fails on unwalkable tiles, on stacks with no units and on tiles
        already holding a different item type.  Same-type stacks merge,
        capped at ``MAX_STACK``.  The stored stack is a copy of ``stack``.

        Returns:
            True if the item was placed.
        """
        tile = self.tile_at(x, y)
        if tile is None or not is_walkable(tile) or stack.quantity <= 0:
            return False
        if tile.item is None:
            tile.item = ItemStack(stack.type, min(stack.quantity, MAX_STACK))
        elif tile.item.type is stack.type:
            tile.item.quantity = min(tile.item.quantity + stack.quantity, MAX_STACK)
        else:
            return False
        return True

    def remove_item(self, x: int, y: int) -> ItemStack | None:
        """Detach and return the stack on a tile, if any."""
        tile = self.tile_at(x, y)
        if tile is None or tile.item is None:
            return None
        stack = tile.item
        tile.item = None
        return stack

    def item_at(self, x: int, y: int) -> ItemStack | None:
        tile = self.tile_at(x, y)
        return tile.item if tile is not None else None

    def count_tiles(self, tile_type: TileType) -> int:
        return sum(1 for row in self.tiles for tile in row if tile.type is tile_type)

    # -- Spatial queries --

    def neighbours(
        self,
        x: int,
        y: int,
        *,
        include_diagonals: bool = True,
    ) -> list[Position]:
        """Return walkable neighbouring positions.

        This is a general-purpose query; colonist movement never uses the
        diagonal entries (see ``burrow.world.pathfinding``).

        Args:
            x: Column index.
            y: Row index.
            include_diagonals: If True, consider up to 8 neighbours; otherwise 4.

        Returns:
            In-bounds walkable neighbour positions.
        """
        offsets = [(0, -1), (0, 1), (-1, 0), (1, 0)]
        if include_diagonals:
            offsets += [(-1, -1), (1, -1), (-1, 1), (1, 1)]

        result: list[Position] = []
        for dx, dy in offsets:
            nx, ny = x + dx, y + dy
            if self.is_walkable_at(nx, ny):
                result.append((nx, ny))
        return result

    # -- Generation --

    def generate(self, rng: Generator) -> None:
        """Lay out fresh terrain.

        Produces a rock border, scattered trees, two or three small water
        pools and a cleared grass area in the middle where the colony
        starts.  Every random draw comes from ``rng``.

        Args:
            rng: Seeded random generator.
        """
        for y in range(self.height):
            for x in range(self.width):
                border = (
                    x < _BORDER
                    or x >= self.width - _BORDER
                    or y < _BORDER
                    or y >= self.height - _BORDER
                )
                self.tiles[y][x] = Tile(TileType.ROCK if border else TileType.GRASS)

        for y in range(_BORDER, self.height - _BORDER):
            for x in range(_BORDER, self.width - _BORDER):
                if rng.random() < _TREE_CHANCE:
                    self.tiles[y][x] = Tile(TileType.TREE)

        num_pools = 2 + int(rng.integers(0, 2))
        for _ in range(num_pools):
            self._grow_pool(rng)

        cx, cy = self.width // 2, self.height // 2
        for y in range(cy - _START_AREA_HALF, cy + _START_AREA_HALF):
            for x in range(cx - _START_AREA_HALF, cx + _START_AREA_HALF):
                if self.in_bounds(x, y):
                    self.tiles[y][x] = Tile(TileType.GRASS)

    def _grow_pool(self, rng: Generator) -> None:
        """Flood a small randomly shaped pool of water."""
        span_x = max(1, self.width - 2 * _POOL_MARGIN * 2)
        span_y = max(1, self.height - 2 * _POOL_MARGIN * 2)
        start = (
            2 * _POOL_MARGIN + int(rng.integers(0, span_x)),
            2 * _POOL_MARGIN + int(rng.integers(0, span_y)),
        )
        size = 5 + int(rng.integers(0, 4))

        queue: deque[Position] = deque([start])
        placed = 0
        while queue and placed < size:
            x, y = queue.popleft()
            if not (
                _POOL_MARGIN <= x < self.width - _POOL_MARGIN
                and _POOL_MARGIN <= y < self.height - _POOL_MARGIN
            ):
                continue
            tile = self.tiles[y][x]
            if tile.type not in (TileType.GRASS, TileType.TREE):
                continue
            self.tiles[y][x] = Tile(TileType.WATER)
            placed += 1
            for dx, dy in ((1, 0), (-1, 0), (0, 1), (0, -1)):
                if rng.random() < _POOL_GROW_CHANCE:
                    queue.append((x + dx, y + dy))
