"""SimulationEngine — the main tick loop.

Owns all top-level simulation state and advances it in the canonical
tick order:

1. Advance the clock (one game minute per simulated second)
2. Decay colonist needs
3. Remove the dead, releasing their tasks
4. Run colonist decisions
5. Move colonists and advance their work
6. Occasionally spawn forage on open grass

Between ticks the host may call the command methods (designate, build,
pause...).  Nothing here runs concurrently with ``update``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

import numpy as np
from numpy.random import Generator

from burrow.colony.colonist import Colonist, ColonistState
from burrow.colony.task import DEFAULT_PRIORITY, Task, TaskType, create_task, find_task
from burrow.economy.building import BuildType, Bed, Stockpile, can_build, create_stockpile, is_in_stockpile
from burrow.economy.items import ItemStack, ItemType, total_stockpiled
from burrow.simulation import behaviour
from burrow.simulation.config import SimulationConfig
from burrow.simulation.events import EventSink, GameEvent, MessageLog, NullEventSink
from burrow.simulation.ids import IdSequence
from burrow.simulation.leaderboard import calculate_score
from burrow.world.clock import GameClock
from burrow.world.pathfinding import manhattan, path_to_work_site
from burrow.world.tile import TileType
from burrow.world.world import Position, World

logger = logging.getLogger(__name__)

_FORAGE_MARGIN = 5
_MIN_PRIORITY = 1
_MAX_PRIORITY = 9


class GameScreen(Enum):
    """Which phase the host application is in."""

    TITLE = "TITLE"
    PLAYING = "PLAYING"


class DesignMode(Enum):
    """What an area drag designates."""

    NONE = "NONE"
    MINE = "MINE"
    CHOP = "CHOP"
    BUILD = "BUILD"
    STOCKPILE = "STOCKPILE"


@dataclass
class ColonyStats:
    """Running totals used for scoring.

    Attributes:
        max_colonists: Largest population seen.
        tiles_built: Structures completed.
    """

    max_colonists: int = 0
    tiles_built: int = 0


@dataclass
class SimulationEngine:
    """Drives the colony forward tick by tick.

    Attributes:
        config: Loaded simulation configuration.
        events: Sink receiving sound-worthy events.
        world: The tile grid.
        clock: In-game calendar.
        colonists: Living colonists.
        tasks: Every queued task, assigned or not.
        stockpiles: Storage zones.
        beds: Built beds.
        messages: Recent player-facing messages.
        ids: Id sequence for every entity this engine creates.
        rng: Master seeded random generator.
        stats: Totals used for scoring.
        screen: Current host phase; only PLAYING advances.
        paused: When True, ``update`` does nothing.
        design_mode: What area designation currently creates.
        selected_build: Structure placed in BUILD mode.
        selected_priority: Priority given to new designations.
        forage_timer: Seconds since the last forage roll.
        tick: Number of updates applied.
    """

    config: SimulationConfig
    events: EventSink = field(default_factory=NullEventSink)
    world: World = field(init=False)
    clock: GameClock = field(init=False)
    colonists: list[Colonist] = field(init=False, default_factory=list)
    tasks: list[Task] = field(init=False, default_factory=list)
    stockpiles: list[Stockpile] = field(init=False, default_factory=list)
    beds: list[Bed] = field(init=False, default_factory=list)
    messages: MessageLog = field(init=False)
    ids: IdSequence = field(init=False, default_factory=IdSequence)
    rng: Generator = field(init=False)
    stats: ColonyStats = field(init=False, default_factory=ColonyStats)
    screen: GameScreen = GameScreen.TITLE
    paused: bool = False
    design_mode: DesignMode = DesignMode.NONE
    selected_build: BuildType | None = None
    selected_priority: int = DEFAULT_PRIORITY
    forage_timer: float = 0.0
    tick: int = 0

    def __post_init__(self) -> None:
        """Build world, clock, message log and RNG from config."""
        self.rng = np.random.default_rng(self.config.seed)
        self.world = World(
            width=self.config.world_width,
            height=self.config.world_height,
        )
        if self.config.generate_terrain:
            self.world.generate(self.rng)
        self.clock = GameClock(
            day=self.config.starting_day,
            hour=self.config.starting_hour,
        )
        self.messages = MessageLog(self.config.max_messages)

    # -- Lifecycle --

    def start(self) -> None:
        """Enter the PLAYING phase and settle the starting colonists.

        Colonists are placed in a 3-wide block around the map centre.
        """
        if self.screen is GameScreen.PLAYING:
            logger.warning("start() called on a running game; ignoring")
            return
        self.screen = GameScreen.PLAYING

        cx, cy = self.world.width // 2, self.world.height // 2
        for i in range(self.config.starting_colonists):
            pos = (cx + i % 3 - 1, cy + i // 3 - 1)
            self.add_colonist(pos)

        self.forage_timer = 0.0
        logger.info(
            "Colony started with %d colonists (seed=%d)",
            len(self.colonists),
            self.config.seed,
        )

    def add_colonist(self, pos: Position, name: str | None = None) -> Colonist:
        """Spawn a colonist at ``pos`` and welcome them."""
        colonist = Colonist.spawn(self.ids, pos, self.rng, name=name)
        self.colonists.append(colonist)
        self.stats.max_colonists = max(self.stats.max_colonists, len(self.colonists))
        self.add_message(f"{colonist.name} has joined the colony")
        return colonist

    def update(self, dt: float) -> None:
        """Advance the simulation by ``dt`` seconds.

        A no-op while paused or outside the PLAYING phase.
        """
        if self.paused or self.screen is not GameScreen.PLAYING:
            return

        # 1. Clock
        for _ in range(self.clock.advance(dt)):
            self.add_message(f"Day {self.clock.day} begins")
            logger.info("Day %d begins", self.clock.day)

        # 2. Needs
        for colonist in self.colonists:
            colonist.decay_needs(dt)

        # 3. Deaths
        self._remove_dead()

        # 4. Decisions
        for colonist in self.colonists:
            behaviour.decide(self, colonist, dt)

        # 5. Work
        behaviour.process_work(self, dt)

        # 6. Forage
        self.forage_timer += dt
        if self.forage_timer >= self.config.forage_spawn_interval:
            self.spawn_forage_items()
            self.forage_timer = 0.0

        self.tick += 1

    def run(self, ticks: int, dt: float = 1.0) -> None:
        """Apply ``ticks`` updates of ``dt`` seconds each."""
        for _ in range(ticks):
            self.update(dt)

    def _remove_dead(self) -> None:
        """Drop dead colonists; their tasks go back to the pool."""
        alive: list[Colonist] = []
        for colonist in self.colonists:
            if not colonist.is_dead:
                alive.append(colonist)
                continue
            self.add_message(f"{colonist.name} has died")
            self.emit(GameEvent.ALERT)
            logger.info("%s (%s) died at %s", colonist.name, colonist.id, colonist.pos)
            task = find_task(self.tasks, colonist.current_task)
            if task is not None:
                task.unassign()
            for bed in self.beds:
                if bed.occupied_by == colonist.id:
                    bed.occupied_by = None
        self.colonists = alive

    # -- Tasks --

    def add_task(
        self,
        task_type: TaskType,
        pos: Position,
        priority: int = DEFAULT_PRIORITY,
        build_type: BuildType | None = None,
    ) -> Task:
        task = create_task(self.ids, task_type, pos, priority, build_type)
        self.tasks.append(task)
        return task

    def claim_task(
        self,
        task: Task,
        colonist: Colonist,
        state: ColonistState = ColonistState.WORKING,
    ) -> bool:
        """Hand ``task`` to ``colonist`` and route them to it.

        If someone else held the task, their pointer to it is cleared first
        so that no two colonists ever believe they own the same task.

        Returns:
            False, leaving both task and colonist untouched, when the
            colonist can neither reach the task's work site nor already
            stands on or beside the target.
        """
        path = path_to_work_site(self.world, colonist.pos, task.pos)
        if not path:
            if manhattan(colonist.pos, task.pos) > 1:
                logger.debug("%s cannot reach %s at %s", colonist.id, task.id, task.pos)
                return False
            path = [colonist.pos]

        previous = task.assigned_to
        if previous is not None and previous != colonist.id:
            holder = self.colonist_by_id(previous)
            if holder is not None and holder.current_task == task.id:
                holder.clear_task()
                holder.clear_path()
                logger.debug("%s lost %s to %s", previous, task.id, colonist.id)

        task.assign(colonist.id)
        colonist.assign_task(task.id)
        colonist.state = state
        colonist.set_path(path)
        logger.debug(
            "%s claimed %s (%s) at %s, path %d",
            colonist.id,
            task.id,
            task.type.name,
            task.pos,
            len(colonist.path),
        )
        return True

    def assign_tasks(self) -> None:
        """Dispatch every unassigned task to the nearest idle colonist who can reach it."""
        for task in [t for t in self.tasks if t.assigned_to is None]:
            idle = [c for c in self.colonists if c.is_idle]
            if not idle:
                break
            for colonist in sorted(idle, key=lambda c: manhattan(c.pos, task.pos)):
                if self.claim_task(task, colonist):
                    break

    def colonist_by_id(self, colonist_id: str) -> Colonist | None:
        return next((c for c in self.colonists if c.id == colonist_id), None)

    # -- Player commands --

    def pause(self) -> None:
        self.paused = True

    def resume(self) -> None:
        self.paused = False

    def toggle_pause(self) -> None:
        self.paused = not self.paused

    def set_design_mode(self, mode: DesignMode) -> None:
        """Switch designation mode; leaving BUILD drops the selected structure."""
        self.design_mode = mode
        if mode is not DesignMode.BUILD:
            self.selected_build = None

    def set_selected_build(self, build_type: BuildType) -> None:
        self.selected_build = build_type
        self.design_mode = DesignMode.BUILD

    def set_selected_priority(self, priority: int) -> None:
        self.selected_priority = max(_MIN_PRIORITY, min(_MAX_PRIORITY, priority))

    def designate_area(self, corner1: Position, corner2: Position) -> int:
        """Apply the current design mode to a rectangle (corners inclusive).

        MINE/CHOP mark matching terrain and queue one task per newly marked
        tile.  STOCKPILE turns the GRASS/FLOOR tiles not already stored into
        one new stockpile.  BUILD queues the selected structure wherever it
        can go.

        Returns:
            Number of tiles affected.
        """
        min_x, max_x = sorted((corner1[0], corner2[0]))
        min_y, max_y = sorted((corner1[1], corner2[1]))
        area = [
            (x, y)
            for y in range(min_y, max_y + 1)
            for x in range(min_x, max_x + 1)
            if self.world.in_bounds(x, y)
        ]

        affected = 0
        match self.design_mode:
            case DesignMode.MINE | DesignMode.CHOP:
                kind = TaskType.MINE if self.design_mode is DesignMode.MINE else TaskType.CHOP
                for x, y in area:
                    tile = self.world.tile_at(x, y)
                    if tile is None or tile.designation is not None:
                        continue
                    if self.world.designate(x, y, kind):
                        self.add_task(kind, (x, y), self.selected_priority)
                        affected += 1
            case DesignMode.STOCKPILE:
                tiles = [
                    pos
                    for pos in area
                    if can_build(self.world, *pos, BuildType.STOCKPILE)
                    and not is_in_stockpile(self.stockpiles, pos)
                ]
                if tiles:
                    self.stockpiles.append(create_stockpile(self.ids, tiles))
                    self.add_message(f"Created stockpile with {len(tiles)} tiles")
                    affected = len(tiles)
            case DesignMode.BUILD:
                affected = sum(1 for pos in area if self.place_build(pos))
            case DesignMode.NONE:
                pass

        if affected:
            self.emit(GameEvent.SELECT)
        return affected

    def place_build(self, pos: Position) -> bool:
        """Queue construction of the selected structure at ``pos``.

        Returns:
            True if a BUILD task was queued.
        """
        if self.selected_build is None:
            return False
        if not can_build(self.world, *pos, self.selected_build):
            return False
        if any(t.type is TaskType.BUILD and t.pos == pos for t in self.tasks):
            return False
        self.add_task(TaskType.BUILD, pos, DEFAULT_PRIORITY, self.selected_build)
        self.add_message(f"Queued {self.selected_build.name.lower()} construction")
        return True

    # -- Ambient --

    def spawn_forage_items(self) -> bool:
        """Roll for a forage spawn and place one raw food on empty grass.

        Returns:
            True if food was placed.
        """
        if self.rng.random() > self.config.forage_spawn_chance:
            return False

        width, height = self.world.width, self.world.height
        mx = _FORAGE_MARGIN if width > 2 * _FORAGE_MARGIN else 0
        my = _FORAGE_MARGIN if height > 2 * _FORAGE_MARGIN else 0
        for _ in range(self.config.forage_spawn_attempts):
            x = mx + int(self.rng.integers(0, width - 2 * mx))
            y = my + int(self.rng.integers(0, height - 2 * my))
            tile = self.world.tile_at(x, y)
            if tile is not None and tile.type is TileType.GRASS and tile.item is None:
                self.world.place_item(x, y, ItemStack(ItemType.RAW_FOOD, 1))
                logger.debug("Forage spawned at (%d, %d)", x, y)
                return True
        return False

    # -- Output --

    def add_message(self, message: str) -> None:
        self.messages.append(message)

    def emit(self, event: GameEvent) -> None:
        self.events.emit(event)

    # -- Read accessors --

    def time_string(self) -> str:
        return self.clock.time_string()

    def is_daytime(self) -> bool:
        return self.clock.is_daytime

    def is_game_over(self) -> bool:
        """Return True once every colonist of a running game has died."""
        return self.screen is GameScreen.PLAYING and not self.colonists

    @property
    def days_lived(self) -> int:
        return self.clock.day - self.config.starting_day

    def score(self) -> int:
        return calculate_score(
            days_lived=self.days_lived,
            max_colonists=self.stats.max_colonists,
            tiles_built=self.stats.tiles_built,
            items_stockpiled=total_stockpiled(self.world, self.stockpiles),
        )
