"""A* pathfinding on the tile grid.

Colonists move strictly in the four cardinal directions with unit step
cost, so Manhattan distance is an exact-when-unobstructed heuristic.  The
open set is a binary heap keyed by ``(f, discovery order)``: among nodes
with equal ``f`` the one discovered first is expanded first.

Note that ``World.neighbours`` exposes an 8-directional neighbour query
for other purposes; it is deliberately not used here.
"""

from __future__ import annotations

import heapq
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from burrow.world.world import Position, World

# Cardinal directions: up, down, left, right
_DIRS = ((0, -1), (0, 1), (-1, 0), (1, 0))


def manhattan(a: Position, b: Position) -> int:
    """Return the Manhattan distance between two positions."""
    return abs(a[0] - b[0]) + abs(a[1] - b[1])


heuristic = manhattan


def path_neighbours(world: World, pos: Position) -> list[Position]:
    """Return the walkable 4-directional neighbours of ``pos``."""
    x, y = pos
    result: list[Position] = []
    for dx, dy in _DIRS:
        nx, ny = x + dx, y + dy
        if world.is_walkable_at(nx, ny):
            result.append((nx, ny))
    return result


def find_path(world: World, start: Position, goal: Position) -> list[Position]:
    """Compute a shortest 4-directional path from ``start`` to ``goal``.

    Args:
        world: The grid to search.
        start: Starting position.  It does not need to be walkable itself.
        goal: Target position.

    Returns:
        Positions from start to goal inclusive.  ``[start]`` when the two
        are equal; ``[]`` when the goal is unwalkable or unreachable.
    """
    if not world.is_walkable_at(*goal):
        return []
    if start == goal:
        return [start]

    counter = 0
    open_heap: list[tuple[int, int, Position]] = [(heuristic(start, goal), counter, start)]
    g_score: dict[Position, int] = {start: 0}
    came_from: dict[Position, Position] = {}
    closed: set[Position] = set()

    while open_heap:
        _, _, current = heapq.heappop(open_heap)
        if current == goal:
            return _reconstruct(came_from, current)
        if current in closed:
            continue
        closed.add(current)

        tentative = g_score[current] + 1
        for neighbour in path_neighbours(world, current):
            if tentative < g_score.get(neighbour, tentative + 1):
                came_from[neighbour] = current
                g_score[neighbour] = tentative
                counter += 1
                heapq.heappush(
                    open_heap,
                    (tentative + heuristic(neighbour, goal), counter, neighbour),
                )

    return []


def has_path(world: World, start: Position, goal: Position) -> bool:
    """Return True if ``find_path`` yields a non-empty path."""
    return bool(find_path(world, start, goal))


def path_to_work_site(world: World, start: Position, target: Position) -> list[Position]:
    """Path to where a colonist can work on ``target``.

    Walkable targets are walked onto.  Unwalkable ones (rock to mine, trees
    to chop) are worked from the closest reachable orthogonal neighbour.

    Returns:
        The shortest such path, or ``[]`` if none exists.
    """
    if world.is_walkable_at(*target):
        return find_path(world, start, target)

    best: list[Position] = []
    for site in path_neighbours(world, target):
        path = find_path(world, start, site)
        if path and (not best or len(path) < len(best)):
            best = path
    return best


def _reconstruct(came_from: dict[Position, Position], node: Position) -> list[Position]:
    """Walk predecessors back to the start and return the forward path."""
    path = [node]
    while node in came_from:
        node = came_from[node]
        path.append(node)
    path.reverse()
    return path
