"""Items — stackable resources lying on the map.

Stacks of the same type merge up to ``MAX_STACK``; a tile holds at most
one stack.  Merging two different item types is a programming error and
raises ``ItemMismatchError``; every other failure is reported through the
return value.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from burrow.economy.building import Stockpile
    from burrow.world.world import Position, World

MAX_STACK = 99


class ItemType(Enum):
    """Kinds of resource a stack can hold."""

    STONE = "STONE"
    WOOD = "WOOD"
    RAW_FOOD = "RAW_FOOD"
    MEAL = "MEAL"


class ItemMismatchError(ValueError):
    """Raised when combining stacks of different item types."""


@dataclass
class ItemStack:
    """A quantity of a single item type.

    Attributes:
        type: What the stack is made of.
        quantity: How many units it holds (positive while on the map).
    """

    type: ItemType
    quantity: int = 1


def create_item(item_type: ItemType, quantity: int = 1) -> ItemStack:
    return ItemStack(item_type, quantity)


def add_items(stack: ItemStack, quantity: int) -> None:
    """Grow a stack, capped at ``MAX_STACK``."""
    stack.quantity = min(stack.quantity + quantity, MAX_STACK)


def remove_items(stack: ItemStack, quantity: int) -> bool:
    """Take ``quantity`` units from a stack.

    Returns:
        False (and leaves the stack unchanged) if ``quantity`` is not
        positive or the stack holds too few.
    """
    if quantity <= 0 or stack.quantity < quantity:
        return False
    stack.quantity -= quantity
    return True


def can_stack(a: ItemStack, b: ItemStack) -> bool:
    """Return True if ``a`` and ``b`` merge without hitting the cap."""
    return a.type is b.type and a.quantity + b.quantity <= MAX_STACK


def merge_items(a: ItemStack, b: ItemStack) -> ItemStack:
    """Return a new stack combining ``a`` and ``b``, capped at ``MAX_STACK``.

    Raises:
        ItemMismatchError: If the stacks hold different item types.
    """
    if a.type is not b.type:
        msg = f"cannot merge {a.type.name} with {b.type.name}"
        raise ItemMismatchError(msg)
    return ItemStack(a.type, min(a.quantity + b.quantity, MAX_STACK))


def split_item(stack: ItemStack, quantity: int) -> ItemStack | None:
    """Split ``quantity`` units off into a new stack.

    Only a strict sub-quantity may be split: the source keeps at least one
    unit.

    Returns:
        The new stack, or None (source unchanged) if ``quantity`` is not
        in ``(0, stack.quantity)``.
    """
    if quantity <= 0 or quantity >= stack.quantity:
        return None
    stack.quantity -= quantity
    return ItemStack(stack.type, quantity)


def nearest_item(world: World, pos: Position, item_type: ItemType) -> Position | None:
    """Return the Manhattan-nearest tile holding ``item_type``.

    Ties go to the first tile in row-major order.
    """
    nearest: Position | None = None
    nearest_dist = -1
    px, py = pos
    for y, row in enumerate(world.tiles):
        for x, tile in enumerate(row):
            if tile.item is None or tile.item.type is not item_type:
                continue
            dist = abs(x - px) + abs(y - py)
            if nearest is None or dist < nearest_dist:
                nearest, nearest_dist = (x, y), dist
    return nearest


def count_in_stockpiles(
    world: World,
    stockpiles: list[Stockpile],
    item_type: ItemType,
) -> int:
    """Sum the quantity of ``item_type`` lying on any stockpile tile."""
    count = 0
    for stockpile in stockpiles:
        for x, y in stockpile.tiles:
            item = world.item_at(x, y)
            if item is not None and item.type is item_type:
                count += item.quantity
    return count


def total_stockpiled(world: World, stockpiles: list[Stockpile]) -> int:
    """Sum every item quantity stored in stockpiles, regardless of type."""
    return sum(count_in_stockpiles(world, stockpiles, t) for t in ItemType)
