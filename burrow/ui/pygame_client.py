"""Pygame 2D front-end for the Burrow colony simulation.

Renders terrain, designations, stockpiles, items and colonists, and maps
mouse drags and key presses onto the engine's command methods.  The
simulation advances by real elapsed time scaled by a speed preset while
the display refreshes at the Pygame frame rate.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import TYPE_CHECKING, ClassVar

import pygame

from burrow.colony.colonist import ColonistState
from burrow.economy.building import BuildType
from burrow.simulation.engine import DesignMode, GameScreen
from burrow.simulation.events import GameEvent
from burrow.simulation.leaderboard import LeaderboardEntry
from burrow.world.tile import TileType

if TYPE_CHECKING:
    from burrow.simulation.engine import SimulationEngine
    from burrow.simulation.leaderboard import Leaderboard
    from burrow.world.world import Position

logger = logging.getLogger(__name__)

# Colour palette
_BG = (20, 20, 20)
_PANEL_TEXT = (200, 200, 200)
_TILE_COLOURS: dict[TileType, tuple[int, int, int]] = {
    TileType.GRASS: (74, 122, 74),
    TileType.ROCK: (106, 106, 106),
    TileType.TREE: (42, 90, 42),
    TileType.WATER: (74, 106, 154),
    TileType.FLOOR: (90, 90, 74),
    TileType.WALL: (138, 122, 106),
    TileType.DOOR: (106, 90, 74),
}
_DESIGNATION = (255, 136, 68, 128)
_STOCKPILE = (170, 136, 255, 80)
_DRAG = (255, 255, 0)
_ITEM = (122, 202, 202)
_NIGHT = (0, 0, 40, 90)

# Colonist colours by state
_COLONIST_COLOURS: dict[ColonistState, tuple[int, int, int]] = {
    ColonistState.IDLE: (255, 255, 255),
    ColonistState.WORKING: (255, 200, 50),
    ColonistState.EATING: (100, 220, 100),
    ColonistState.SLEEPING: (120, 150, 255),
    ColonistState.MOVING: (200, 200, 200),
}

_BUILD_CYCLE = (BuildType.WALL, BuildType.FLOOR, BuildType.DOOR, BuildType.BED)
_LEADERBOARD_ROWS = 5
_HELP_SHADE = (0, 0, 0, 200)
_HELP_TITLE = (120, 220, 120)

HELP_LINES: tuple[str, ...] = (
    "Controls",
    "",
    "D           Designate mining/chopping",
    "B           Build mode (walls, floors, doors, beds)",
    "S           Create stockpile zone",
    "1-9         Priority for new designations",
    "+ / -       Simulation speed",
    "Space       Pause/resume",
    "Escape      Cancel current mode",
    "?           Show this help",
    "Click+Drag  Select area for designation",
    "",
    "Tips:",
    "- Mine rock for stone, chop trees for wood",
    "- Build stockpiles to store resources",
    "- Colonists eat and sleep on their own",
    "- Hungry colonists work slower",
    "",
    "Press any key to close",
)


class PygameRenderer:
    """Renders a SimulationEngine into a Pygame window and feeds it input.

    Attributes:
        engine: The simulation engine to visualise.
        cell_size: Pixel size of each grid cell.
        time_scale: Simulated seconds per real second.
        leaderboard: Where finished colonies are recorded, if anywhere.
        show_help: Whether the controls overlay covers the window.
        screen: The Pygame display surface.
    """

    # Speed presets: simulated seconds per real second
    _SPEED_STEPS: ClassVar[list[float]] = [0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0]

    def __init__(
        self,
        engine: SimulationEngine,
        cell_size: int = 12,
        time_scale: float = 1.0,
        leaderboard: Leaderboard | None = None,
    ) -> None:
        """Initialise the renderer.

        Args:
            engine: The simulation engine to render.
            cell_size: Pixel width/height per grid cell.
            time_scale: Simulated seconds per real second.
            leaderboard: Optional leaderboard for game-over scores.
        """
        self.engine = engine
        self.cell_size = cell_size
        self.time_scale = time_scale
        self.leaderboard = leaderboard
        self._speed_index = self._nearest_speed(time_scale)
        self._drag_start: Position | None = None
        self._drag_end: Position | None = None
        self._recorded = False
        self.show_help = False

        w = engine.world.width * cell_size
        h = engine.world.height * cell_size
        self._panel_width = 260
        self._win_w = w + self._panel_width
        self._win_h = h

        pygame.init()
        self.screen = pygame.display.set_mode((self._win_w, self._win_h))
        pygame.display.set_caption("Burrow")
        self.clock = pygame.time.Clock()
        self.font = pygame.font.SysFont("monospace", 14)
        self.running = True

    def _nearest_speed(self, scale: float) -> int:
        """Return the index of the closest speed preset."""
        return min(
            range(len(self._SPEED_STEPS)),
            key=lambda i: abs(self._SPEED_STEPS[i] - scale),
        )

    def run(self, fps: int = 30) -> None:
        """Main loop: handle input, advance the sim, render.

        Args:
            fps: Target frames per second.
        """
        while self.running:
            dt = self.clock.tick(fps) / 1000.0
            self._handle_events()
            self.engine.update(dt * self.time_scale)
            if self.engine.is_game_over() and not self._recorded:
                self._record_score()
            self._draw()

        pygame.quit()

    def _record_score(self) -> None:
        self._recorded = True
        score = self.engine.score()
        self.engine.add_message(f"The colony has fallen. Score: {score}")
        self.engine.emit(GameEvent.ALERT)
        logger.info("Game over on day %d, score %d", self.engine.clock.day, score)
        if self.leaderboard is None:
            return
        self.leaderboard.add_entry(
            LeaderboardEntry(
                name=f"Colony {self.engine.config.seed}",
                score=score,
                days_lived=self.engine.days_lived,
                max_colonists=self.engine.stats.max_colonists,
                tiles_built=self.engine.stats.tiles_built,
                date=date.today().isoformat(),
            )
        )

    # -- Input --

    def _cell_at(self, pixel: tuple[int, int]) -> Position | None:
        x, y = pixel[0] // self.cell_size, pixel[1] // self.cell_size
        return (x, y) if self.engine.world.in_bounds(x, y) else None

    def _handle_events(self) -> None:
        """Process Pygame input events."""
        engine = self.engine
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
            elif event.type == pygame.KEYDOWN:
                self._handle_key(event)
            elif event.type == pygame.MOUSEBUTTONDOWN and self.show_help:
                self.show_help = False
            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                self._drag_start = self._cell_at(event.pos)
                self._drag_end = self._drag_start
            elif event.type == pygame.MOUSEMOTION and self._drag_start is not None:
                self._drag_end = self._cell_at(event.pos) or self._drag_end
            elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                if self._drag_start is not None and self._drag_end is not None:
                    engine.designate_area(self._drag_start, self._drag_end)
                self._drag_start = self._drag_end = None

    def _handle_key(self, event: pygame.event.Event) -> None:
        engine = self.engine
        if engine.screen is GameScreen.TITLE:
            if event.key in (pygame.K_RETURN, pygame.K_SPACE):
                engine.start()
            elif event.key == pygame.K_ESCAPE:
                self.running = False
            return

        if self.show_help:
            self.show_help = False
            return

        if event.unicode == "?":
            self.show_help = True
            return

        if event.key == pygame.K_ESCAPE:
            if engine.design_mode is DesignMode.NONE:
                self.running = False
            engine.set_design_mode(DesignMode.NONE)
            self._drag_start = self._drag_end = None
        elif event.key == pygame.K_SPACE:
            engine.toggle_pause()
            engine.emit(GameEvent.SELECT)
        elif event.key == pygame.K_d:
            nxt = DesignMode.CHOP if engine.design_mode is DesignMode.MINE else DesignMode.MINE
            engine.set_design_mode(nxt)
            engine.emit(GameEvent.SELECT)
        elif event.key == pygame.K_b:
            if engine.design_mode is DesignMode.BUILD and engine.selected_build in _BUILD_CYCLE:
                idx = (_BUILD_CYCLE.index(engine.selected_build) + 1) % len(_BUILD_CYCLE)
                engine.set_selected_build(_BUILD_CYCLE[idx])
            else:
                engine.set_selected_build(BuildType.WALL)
            engine.emit(GameEvent.SELECT)
        elif event.key == pygame.K_s:
            engine.set_design_mode(DesignMode.STOCKPILE)
            engine.emit(GameEvent.SELECT)
        elif pygame.K_1 <= event.key <= pygame.K_9:
            engine.set_selected_priority(event.key - pygame.K_0)
        elif event.key in (pygame.K_PLUS, pygame.K_EQUALS):
            self._speed_index = min(len(self._SPEED_STEPS) - 1, self._speed_index + 1)
            self.time_scale = self._SPEED_STEPS[self._speed_index]
        elif event.key == pygame.K_MINUS:
            self._speed_index = max(0, self._speed_index - 1)
            self.time_scale = self._SPEED_STEPS[self._speed_index]

    # -- Drawing --

    def _draw(self) -> None:
        """Render one frame."""
        self.screen.fill(_BG)
        self._draw_terrain()
        self._draw_overlays()
        self._draw_items()
        self._draw_colonists()
        self._draw_drag()
        self._draw_info_panel()
        if self.show_help:
            self._draw_help()
        pygame.display.flip()

    def _draw_terrain(self) -> None:
        cs = self.cell_size
        for y, row in enumerate(self.engine.world.tiles):
            for x, tile in enumerate(row):
                pygame.draw.rect(self.screen, _TILE_COLOURS[tile.type], (x * cs, y * cs, cs, cs))

    def _draw_overlays(self) -> None:
        """Draw designations, stockpile zones and the night tint."""
        cs = self.cell_size
        world = self.engine.world
        overlay = pygame.Surface((world.width * cs, world.height * cs), pygame.SRCALPHA)
        for y, row in enumerate(world.tiles):
            for x, tile in enumerate(row):
                if tile.designation is not None:
                    pygame.draw.rect(overlay, _DESIGNATION, (x * cs, y * cs, cs, cs))
        for stockpile in self.engine.stockpiles:
            for x, y in stockpile.tiles:
                pygame.draw.rect(overlay, _STOCKPILE, (x * cs, y * cs, cs, cs))
        self.screen.blit(overlay, (0, 0))
        if not self.engine.is_daytime():
            night = pygame.Surface(overlay.get_size(), pygame.SRCALPHA)
            night.fill(_NIGHT)
            self.screen.blit(night, (0, 0))

    def _draw_items(self) -> None:
        cs = self.cell_size
        size = max(2, cs // 2)
        for y, row in enumerate(self.engine.world.tiles):
            for x, tile in enumerate(row):
                if tile.item is not None:
                    off = (cs - size) // 2
                    pygame.draw.rect(self.screen, _ITEM, (x * cs + off, y * cs + off, size, size))

    def _draw_colonists(self) -> None:
        """Draw each colonist as a dot coloured by state."""
        cs = self.cell_size
        radius = max(2, cs // 3)
        for colonist in self.engine.colonists:
            colour = _COLONIST_COLOURS[colonist.state]
            x, y = colonist.pos
            pygame.draw.circle(self.screen, colour, (x * cs + cs // 2, y * cs + cs // 2), radius)

    def _draw_drag(self) -> None:
        if self._drag_start is None or self._drag_end is None:
            return
        cs = self.cell_size
        x0, x1 = sorted((self._drag_start[0], self._drag_end[0]))
        y0, y1 = sorted((self._drag_start[1], self._drag_end[1]))
        rect = (x0 * cs, y0 * cs, (x1 - x0 + 1) * cs, (y1 - y0 + 1) * cs)
        pygame.draw.rect(self.screen, _DRAG, rect, width=1)

    def _draw_info_panel(self) -> None:
        """Draw a status panel on the right side of the window."""
        engine = self.engine
        panel_x = engine.world.width * self.cell_size + 10
        y = 10

        if engine.screen is GameScreen.TITLE:
            lines = ["BURROW", "", "ENTER: start", "ESC: quit"]
            if self.leaderboard is not None:
                lines += ["", "--- Best colonies ---"]
                lines += [
                    f"{i}. {e.score:>6}  day {e.days_lived}"
                    for i, e in enumerate(self.leaderboard.top(_LEADERBOARD_ROWS), start=1)
                ]
        else:
            mode = engine.design_mode.name
            if engine.selected_build is not None:
                mode += f" ({engine.selected_build.name})"
            lines = [
                engine.time_string(),
                "DAY" if engine.is_daytime() else "NIGHT",
                f"Speed: {self.time_scale:g}x",
                "PAUSED" if engine.paused else "RUNNING",
                f"Mode: {mode}",
                f"Priority: {engine.selected_priority}",
                f"Tasks: {len(engine.tasks)}",
                f"Score: {engine.score()}",
                "",
                f"--- Colonists ({len(engine.colonists)}) ---",
            ]
            for colonist in engine.colonists:
                needs = colonist.needs
                lines.append(f"{colonist.name[:8]:<8} {colonist.state.name[:5]}")
                lines.append(
                    f"  H{needs.health:3.0f} F{needs.hunger:3.0f} R{needs.rest:3.0f} M{needs.mood:3.0f}"
                )
            lines += ["", "--- Messages ---", *engine.messages.as_list()[-5:]]
            lines += [
                "",
                "D: mine/chop  B: build",
                "S: stockpile  1-9: priority",
                "SPACE: pause  +/-: speed",
                "ESC: clear mode / quit",
                "?: help",
            ]

        for line in lines:
            surf = self.font.render(line, True, _PANEL_TEXT)
            self.screen.blit(surf, (panel_x, y))
            y += 18

    def _draw_help(self) -> None:
        """Shade the whole window and list the controls on top."""
        shade = pygame.Surface((self._win_w, self._win_h), pygame.SRCALPHA)
        shade.fill(_HELP_SHADE)
        self.screen.blit(shade, (0, 0))

        line_h = 18
        x = 40
        y = max(10, (self._win_h - line_h * len(HELP_LINES)) // 2)
        for i, line in enumerate(HELP_LINES):
            colour = _HELP_TITLE if i == 0 else _PANEL_TEXT
            self.screen.blit(self.font.render(line, True, colour), (x, y))
            y += line_h
