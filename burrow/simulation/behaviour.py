"""Behaviour — colonist decisions, movement, work and task completion.

The engine calls ``decide`` once per living colonist and then
``process_work`` once per tick.  Decisions only ever start from IDLE and
follow a strict priority order, first match wins:

1. Hungry: reserve the nearest reachable meal (else raw food) and go
   eat it.
2. Tired: fall asleep where standing.
3. Take the nearest reachable unassigned task, scanning candidates in
   ascending priority number.
4. Haul a loose item when a stockpile exists.
5. Cook raw food lying in a stockpile.

Everything else stays IDLE.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from burrow.colony.colonist import ColonistState, Need
from burrow.colony.task import TaskType, find_task, remove_task, unassigned_tasks
from burrow.economy.building import (
    BuildType,
    build,
    build_cost,
    can_build,
    consume_materials,
    create_bed,
    create_stockpile,
    find_nearest_stockpile_space,
    has_materials,
    is_in_stockpile,
)
from burrow.economy.items import ItemStack, ItemType, nearest_item
from burrow.simulation.events import GameEvent
from burrow.world.pathfinding import manhattan, path_to_work_site
from burrow.world.tile import TileType

if TYPE_CHECKING:
    from burrow.colony.colonist import Colonist
    from burrow.colony.task import Task
    from burrow.simulation.engine import SimulationEngine
    from burrow.world.world import Position

logger = logging.getLogger(__name__)

# -- Constants ---------------------------------------------------------------

MINE_YIELD = 2
CHOP_YIELD = 2
MEAL_HUNGER_RESTORE = 50.0
SLEEP_REST_PER_SECOND = 2.0

EAT_PRIORITY = 10
COOK_PRIORITY = 7
HAUL_PRIORITY = 8


# -- Decisions ---------------------------------------------------------------


def decide(engine: SimulationEngine, colonist: Colonist, dt: float) -> None:
    """Run one decision step for a colonist.

    Sleepers recover rest and wake at 100.  Eaters and workers keep their
    current task.  Only IDLE colonists pick something new.
    """
    if colonist.state is ColonistState.SLEEPING:
        colonist.satisfy_need(Need.REST, SLEEP_REST_PER_SECOND * dt)
        if colonist.needs.rest >= 100:
            colonist.state = ColonistState.IDLE
            colonist.clear_path()
            engine.add_message(f"{colonist.name} woke up")
        return

    if not colonist.is_idle:
        return

    if colonist.is_hungry and _seek_food(engine, colonist):
        return

    if colonist.is_tired:
        colonist.state = ColonistState.SLEEPING
        engine.add_message(f"{colonist.name} went to sleep")
        engine.emit(GameEvent.SLEEP)
        return

    candidates = sorted(unassigned_tasks(engine.tasks), key=lambda t: t.priority)
    while candidates:
        nearest = find_nearest_task(colonist.pos, candidates)
        if engine.claim_task(nearest, colonist):
            return
        candidates.remove(nearest)

    if engine.stockpiles:
        haul_pos = find_item_to_haul(engine, colonist.pos)
        if haul_pos is not None:
            task = engine.add_task(TaskType.HAUL, haul_pos, HAUL_PRIORITY)
            engine.claim_task(task, colonist)
            return

    cook_pos = find_raw_food_to_cook(engine, colonist.pos)
    if cook_pos is not None:
        task = engine.add_task(TaskType.COOK, cook_pos, COOK_PRIORITY)
        engine.claim_task(task, colonist)


def _seek_food(engine: SimulationEngine, colonist: Colonist) -> bool:
    """Reserve the nearest food and start an EAT task on it.

    The food leaves the map immediately so no one else can target it.
    Food the colonist cannot walk to stays where it is.
    """
    for food_type in (ItemType.MEAL, ItemType.RAW_FOOD):
        food_pos = nearest_item(engine.world, colonist.pos, food_type)
        if food_pos is None:
            continue
        task = engine.add_task(TaskType.EAT, food_pos, EAT_PRIORITY)
        if engine.claim_task(task, colonist, state=ColonistState.EATING):
            engine.world.remove_item(*food_pos)
            return True
        engine.tasks = remove_task(engine.tasks, task.id)
    return False


def find_nearest_task(pos: Position, tasks: list[Task]) -> Task | None:
    """Return the Manhattan-nearest task; earlier tasks win ties."""
    nearest: Task | None = None
    for task in tasks:
        if nearest is None or manhattan(pos, task.pos) < manhattan(pos, nearest.pos):
            nearest = task
    return nearest


def find_item_to_haul(engine: SimulationEngine, origin: Position | None = None) -> Position | None:
    """Return the first loose item (row-major) nobody is hauling yet.

    With ``origin`` given, items that cannot be reached from it are skipped.
    """
    hauled = {t.pos for t in engine.tasks if t.type is TaskType.HAUL}
    for y, row in enumerate(engine.world.tiles):
        for x, tile in enumerate(row):
            if tile.item is None or (x, y) in hauled:
                continue
            if is_in_stockpile(engine.stockpiles, (x, y)):
                continue
            if _reachable(engine, origin, (x, y)):
                return (x, y)
    return None


def find_raw_food_to_cook(engine: SimulationEngine, origin: Position | None = None) -> Position | None:
    """Return the first stockpiled raw food nobody is cooking yet.

    With ``origin`` given, food that cannot be reached from it is skipped.
    """
    cooking = {t.pos for t in engine.tasks if t.type is TaskType.COOK}
    for stockpile in engine.stockpiles:
        for pos in stockpile.tiles:
            item = engine.world.item_at(*pos)
            if item is None or item.type is not ItemType.RAW_FOOD or pos in cooking:
                continue
            if _reachable(engine, origin, pos):
                return pos
    return None


def _reachable(engine: SimulationEngine, origin: Position | None, target: Position) -> bool:
    if origin is None or manhattan(origin, target) <= 1:
        return True
    return bool(path_to_work_site(engine.world, origin, target))


# -- Work --------------------------------------------------------------------


def process_work(engine: SimulationEngine, dt: float) -> None:
    """Move busy colonists along their paths and advance their tasks.

    A colonist with more than one node left on its path takes at most one
    step, gated by its movement cooldown.  Once it has arrived it earns
    ``work_speed * dt * work_ticks_per_second`` progress.
    """
    config = engine.config
    for colonist in list(engine.colonists):
        if colonist.state not in (ColonistState.WORKING, ColonistState.EATING):
            continue

        task = find_task(engine.tasks, colonist.current_task)
        if task is None or task.assigned_to != colonist.id:
            colonist.clear_task()
            colonist.clear_path()
            continue

        if len(colonist.path) > 1:
            colonist.move_cooldown -= dt * colonist.movement_speed()
            if colonist.move_cooldown <= 0:
                _step(engine, colonist, task)
                colonist.move_cooldown = config.move_cooldown
            continue

        amount = colonist.work_speed(task.type) * dt * config.work_ticks_per_second
        if task.advance(amount):
            complete_task(engine, task, colonist)


def _step(engine: SimulationEngine, colonist: Colonist, task: Task) -> None:
    """Take the next step, re-planning if the way has been built over.

    When no route is left the task goes back to the pool unassigned.
    """
    next_pos = colonist.path[1]
    if not engine.world.is_walkable_at(*next_pos):
        path = path_to_work_site(engine.world, colonist.pos, task.pos)
        if not path:
            task.unassign()
            colonist.clear_task()
            colonist.clear_path()
            logger.debug("%s gave up on unreachable %s", colonist.id, task.id)
            return
        colonist.set_path(path)
        logger.debug("%s re-planned route to %s", colonist.id, task.id)
        return
    colonist.move_to(next_pos)
    colonist.path.pop(0)


def complete_task(engine: SimulationEngine, task: Task, colonist: Colonist) -> None:
    """Apply the effects of a finished task, then retire it.

    The task is removed from the queue and the colonist returns to IDLE
    whatever the outcome.
    """
    world = engine.world
    x, y = task.pos

    match task.type:
        case TaskType.MINE:
            world.set_tile_type(x, y, TileType.FLOOR)
            world.clear_designation(x, y)
            world.place_item(x, y, ItemStack(ItemType.STONE, MINE_YIELD))
            engine.add_message(f"{colonist.name} finished mining")
            engine.emit(GameEvent.MINE)
        case TaskType.CHOP:
            world.set_tile_type(x, y, TileType.GRASS)
            world.clear_designation(x, y)
            world.place_item(x, y, ItemStack(ItemType.WOOD, CHOP_YIELD))
            engine.add_message(f"{colonist.name} finished chopping")
            engine.emit(GameEvent.CHOP)
        case TaskType.HAUL:
            _complete_haul(engine, task, colonist)
        case TaskType.COOK:
            raw = world.remove_item(x, y)
            if raw is not None and raw.type is ItemType.RAW_FOOD:
                world.place_item(x, y, ItemStack(ItemType.MEAL, raw.quantity))
                engine.add_message(f"{colonist.name} cooked a meal")
                engine.emit(GameEvent.TASK_COMPLETE)
            elif raw is not None:
                world.place_item(x, y, raw)
        case TaskType.BUILD:
            _complete_build(engine, task, colonist)
        case TaskType.EAT:
            colonist.satisfy_need(Need.HUNGER, MEAL_HUNGER_RESTORE)
            engine.add_message(f"{colonist.name} ate a meal")
            engine.emit(GameEvent.EAT)
        case TaskType.SLEEP:
            pass

    logger.debug("%s completed %s (%s) at %s", colonist.id, task.id, task.type.name, task.pos)
    engine.tasks = remove_task(engine.tasks, task.id)
    colonist.clear_task()
    colonist.clear_path()


def _complete_haul(engine: SimulationEngine, task: Task, colonist: Colonist) -> None:
    world = engine.world
    item = world.remove_item(*task.pos)
    if item is None:
        return
    space = find_nearest_stockpile_space(world, engine.stockpiles, colonist.pos)
    if space is not None and world.place_item(*space, item):
        engine.add_message(f"{colonist.name} hauled {item.type.name.lower()}")
        engine.emit(GameEvent.TASK_COMPLETE)
    else:
        world.place_item(*task.pos, item)


def _complete_build(engine: SimulationEngine, task: Task, colonist: Colonist) -> None:
    """Pay for and erect a structure.

    Nothing is consumed if the terrain no longer allows the structure.
    """
    build_type = task.build_type
    if build_type is None:
        return
    world = engine.world
    x, y = task.pos
    label = build_type.name.lower()

    if not can_build(world, x, y, build_type):
        engine.add_message(f"{colonist.name} could not build {label} here")
        engine.emit(GameEvent.ALERT)
        return

    cost = build_cost(build_type)
    if has_materials(world, engine.stockpiles, cost):
        consume_materials(world, engine.stockpiles, cost)
    elif engine.config.require_materials:
        engine.add_message(f"Not enough materials to build {label}")
        engine.emit(GameEvent.ALERT)
        return

    build(world, x, y, build_type)
    if build_type is BuildType.BED:
        engine.beds.append(create_bed(engine.ids, task.pos))
    elif build_type is BuildType.STOCKPILE:
        engine.stockpiles.append(create_stockpile(engine.ids, [task.pos]))
    engine.stats.tiles_built += 1
    engine.add_message(f"{colonist.name} finished building {label}")
    engine.emit(GameEvent.BUILD)
