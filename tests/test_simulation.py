"""Tests for burrow.simulation — config loading and the engine loop."""

import logging
from pathlib import Path

import pytest

from burrow.colony.colonist import ColonistState
from burrow.colony.task import TaskType
from burrow.economy.building import BuildType
from burrow.economy.items import ItemStack, ItemType
from burrow.simulation.config import SimulationConfig
from burrow.simulation.engine import DesignMode, GameScreen, SimulationEngine
from burrow.simulation.events import GameEvent
from burrow.world.tile import TileType

_DEFAULT_YAML = Path(__file__).resolve().parent.parent / "config" / "default.yaml"


class TestSimulationConfig:
    """Tests for YAML config loading."""

    def test_defaults(self) -> None:
        cfg = SimulationConfig()
        assert cfg.world_width == 64
        assert cfg.world_height == 48
        assert cfg.starting_colonists == 3
        assert cfg.forage_spawn_interval == 60.0
        assert cfg.forage_spawn_chance == 0.3
        assert cfg.max_messages == 10
        assert cfg.require_materials is False

    def test_from_yaml(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "test.yaml"
        yaml_file.write_text("seed: 99\nworld_width: 16\nworld_height: 20\n")
        cfg = SimulationConfig.from_yaml(yaml_file)
        assert cfg.seed == 99
        assert cfg.world_width == 16
        assert cfg.world_height == 20
        assert cfg.starting_colonists == 3

    def test_empty_yaml_uses_defaults(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "empty.yaml"
        yaml_file.write_text("")
        assert SimulationConfig.from_yaml(yaml_file) == SimulationConfig()

    def test_unknown_keys_ignored(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        yaml_file = tmp_path / "extra.yaml"
        yaml_file.write_text("seed: 3\ncolour: blue\n")
        with caplog.at_level(logging.WARNING):
            cfg = SimulationConfig.from_yaml(yaml_file)
        assert cfg.seed == 3
        assert "colour" in caplog.text

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            SimulationConfig.from_yaml(tmp_path / "nope.yaml")

    @pytest.mark.parametrize(
        "overrides",
        [
            {"world_width": 0},
            {"world_height": -4},
            {"forage_spawn_chance": 1.5},
            {"starting_colonists": -1},
            {"max_messages": 0},
        ],
    )
    def test_invalid_values(self, overrides: dict) -> None:
        with pytest.raises(ValueError):
            SimulationConfig(**overrides)

    def test_shipped_default_yaml(self) -> None:
        cfg = SimulationConfig.from_yaml(_DEFAULT_YAML)
        assert cfg.world_width == 64
        assert cfg.world_height == 48


class TestLifecycle:
    """Tests for starting, pausing and ticking the engine."""

    def test_engine_initialises(self, default_config: SimulationConfig) -> None:
        engine = SimulationEngine(config=default_config)
        assert engine.tick == 0
        assert engine.screen is GameScreen.TITLE
        assert engine.world.width == default_config.world_width
        assert engine.colonists == []
        assert engine.time_string() == "Day 1, 08:00"

    def test_start_spawns_colonists_around_centre(self) -> None:
        engine = SimulationEngine(config=SimulationConfig(generate_terrain=False))
        engine.start()
        assert engine.screen is GameScreen.PLAYING
        assert [c.pos for c in engine.colonists] == [(31, 23), (32, 23), (33, 23)]
        assert engine.stats.max_colonists == 3
        assert sum("has joined the colony" in m for m in engine.messages) == 3

    def test_start_twice_is_ignored(self) -> None:
        engine = SimulationEngine(config=SimulationConfig(generate_terrain=False))
        engine.start()
        engine.start()
        assert len(engine.colonists) == 3

    def test_colonist_ids_unique(self) -> None:
        engine = SimulationEngine(config=SimulationConfig(generate_terrain=False, starting_colonists=6))
        engine.start()
        ids = [c.id for c in engine.colonists]
        assert len(set(ids)) == 6

    def test_update_before_start_is_noop(self, default_config: SimulationConfig) -> None:
        engine = SimulationEngine(config=default_config)
        engine.update(5.0)
        assert engine.tick == 0
        assert engine.clock.minute == 0.0

    def test_paused_update_is_noop(self, engine: SimulationEngine) -> None:
        engine.pause()
        engine.update(5.0)
        assert engine.tick == 0
        assert engine.clock.minute == 0.0
        engine.resume()
        engine.update(5.0)
        assert engine.tick == 1
        assert engine.clock.minute == pytest.approx(5.0)

    def test_toggle_pause(self, engine: SimulationEngine) -> None:
        engine.toggle_pause()
        assert engine.paused
        engine.toggle_pause()
        assert not engine.paused

    def test_run_multiple_ticks(self, engine: SimulationEngine) -> None:
        engine.run(ticks=10)
        assert engine.tick == 10
        assert engine.clock.minute == pytest.approx(10.0)

    def test_day_rollover(self, engine: SimulationEngine) -> None:
        engine.clock.hour = 23
        engine.clock.minute = 59
        engine.update(2.0)
        assert (engine.clock.day, engine.clock.hour) == (2, 0)
        assert engine.clock.minute == pytest.approx(1.0)
        assert engine.messages[-1] == "Day 2 begins"

    def test_message_log_capped(self, engine: SimulationEngine) -> None:
        for i in range(15):
            engine.add_message(f"msg {i}")
        assert len(engine.messages) == 10
        assert engine.messages[0] == "msg 5"
        assert engine.messages[-1] == "msg 14"

    def test_determinism(self) -> None:
        """Same seed must produce identical state after N ticks."""

        def snapshot(engine: SimulationEngine) -> list:
            return [(c.name, c.pos, c.state, c.trait) for c in engine.colonists]

        cfg = SimulationConfig(seed=777)
        engine_a = SimulationEngine(config=cfg)
        engine_b = SimulationEngine(config=cfg)
        for eng in (engine_a, engine_b):
            eng.start()
            eng.run(ticks=50)
        assert snapshot(engine_a) == snapshot(engine_b)
        assert [[t.type for t in row] for row in engine_a.world.tiles] == [
            [t.type for t in row] for row in engine_b.world.tiles
        ]

    def test_clock_starts_from_config(self) -> None:
        engine = SimulationEngine(config=SimulationConfig(starting_day=4, starting_hour=21))
        assert engine.time_string() == "Day 4, 21:00"
        assert not engine.is_daytime()


class TestDesignation:
    """Tests for area designation and build placement."""

    def test_mine_area_only_marks_rock(self, engine: SimulationEngine) -> None:
        engine.world.set_tile_type(2, 2, TileType.ROCK)
        engine.world.set_tile_type(3, 3, TileType.ROCK)
        engine.world.set_tile_type(2, 3, TileType.TREE)
        engine.set_design_mode(DesignMode.MINE)
        assert engine.designate_area((3, 3), (2, 2)) == 2
        assert sorted(t.pos for t in engine.tasks) == [(2, 2), (3, 3)]
        assert all(t.type is TaskType.MINE for t in engine.tasks)
        assert engine.world.tile_at(2, 3).designation is None
        assert GameEvent.SELECT in engine.events.events

    def test_redesignation_adds_no_duplicates(self, engine: SimulationEngine) -> None:
        engine.world.set_tile_type(4, 4, TileType.TREE)
        engine.set_design_mode(DesignMode.CHOP)
        engine.designate_area((4, 4), (4, 4))
        assert engine.designate_area((3, 3), (5, 5)) == 0
        assert len(engine.tasks) == 1

    def test_designation_uses_selected_priority(self, engine: SimulationEngine) -> None:
        engine.world.set_tile_type(4, 4, TileType.ROCK)
        engine.set_design_mode(DesignMode.MINE)
        engine.set_selected_priority(8)
        engine.designate_area((4, 4), (4, 4))
        assert engine.tasks[0].priority == 8

    def test_priority_clamped(self, engine: SimulationEngine) -> None:
        engine.set_selected_priority(12)
        assert engine.selected_priority == 9
        engine.set_selected_priority(0)
        assert engine.selected_priority == 1

    def test_area_clipped_to_map(self, engine: SimulationEngine) -> None:
        engine.world.set_tile_type(0, 0, TileType.ROCK)
        engine.set_design_mode(DesignMode.MINE)
        assert engine.designate_area((-5, -5), (0, 0)) == 1

    def test_none_mode_does_nothing(self, engine: SimulationEngine) -> None:
        engine.world.set_tile_type(1, 1, TileType.ROCK)
        assert engine.designate_area((0, 0), (3, 3)) == 0
        assert engine.tasks == []

    def test_stockpile_area(self, engine: SimulationEngine) -> None:
        engine.world.set_tile_type(3, 1, TileType.WATER)
        engine.set_design_mode(DesignMode.STOCKPILE)
        assert engine.designate_area((1, 1), (3, 1)) == 2
        assert len(engine.stockpiles) == 1
        assert engine.stockpiles[0].tiles == [(1, 1), (2, 1)]
        # Overlap only adds the new tiles
        assert engine.designate_area((1, 1), (1, 2)) == 1
        assert engine.stockpiles[1].tiles == [(1, 2)]

    def test_build_needs_floor(self, engine: SimulationEngine) -> None:
        engine.set_selected_build(BuildType.WALL)
        assert engine.design_mode is DesignMode.BUILD
        assert engine.designate_area((1, 1), (2, 1)) == 0
        engine.world.set_tile_type(1, 1, TileType.FLOOR)
        engine.world.set_tile_type(2, 1, TileType.FLOOR)
        assert engine.designate_area((1, 1), (2, 1)) == 2
        assert {t.build_type for t in engine.tasks} == {BuildType.WALL}

    def test_place_build_skips_duplicates(self, engine: SimulationEngine) -> None:
        engine.world.set_tile_type(1, 1, TileType.FLOOR)
        engine.set_selected_build(BuildType.BED)
        assert engine.place_build((1, 1))
        assert not engine.place_build((1, 1))
        assert len(engine.tasks) == 1
        assert engine.messages[-1] == "Queued bed construction"

    def test_place_build_without_selection(self, engine: SimulationEngine) -> None:
        engine.world.set_tile_type(1, 1, TileType.FLOOR)
        assert not engine.place_build((1, 1))

    def test_leaving_build_mode_clears_selection(self, engine: SimulationEngine) -> None:
        engine.set_selected_build(BuildType.DOOR)
        engine.set_design_mode(DesignMode.MINE)
        assert engine.selected_build is None


class TestForage:
    """Tests for random food spawning."""

    def test_spawn_on_grass(self, engine: SimulationEngine) -> None:
        engine.config.forage_spawn_chance = 1.0
        assert engine.spawn_forage_items()
        spots = [
            (x, y)
            for y, row in enumerate(engine.world.tiles)
            for x, tile in enumerate(row)
            if tile.item is not None
        ]
        assert len(spots) == 1
        x, y = spots[0]
        assert 5 <= x < 11
        assert 5 <= y < 11
        assert engine.world.item_at(x, y) == ItemStack(ItemType.RAW_FOOD, 1)

    def test_zero_chance(self, engine: SimulationEngine) -> None:
        assert not engine.spawn_forage_items()

    def test_no_grass_left(self, engine: SimulationEngine) -> None:
        engine.config.forage_spawn_chance = 1.0
        for y in range(16):
            for x in range(16):
                engine.world.set_tile_type(x, y, TileType.FLOOR)
        assert not engine.spawn_forage_items()

    def test_spawn_on_interval(self, engine: SimulationEngine) -> None:
        engine.config.forage_spawn_chance = 1.0
        engine.run(ticks=59)
        assert not any(t.item for row in engine.world.tiles for t in row)
        engine.update(1.0)
        assert sum(1 for row in engine.world.tiles for t in row if t.item) == 1
        assert engine.forage_timer == 0.0


class TestDeathAndScore:
    """Tests for colonist death, game over and scoring."""

    def test_starvation_drains_health(self, engine: SimulationEngine, add_colonist) -> None:
        colonist = add_colonist((3, 3))
        colonist.needs.hunger = 0.0
        engine.update(0.5)
        assert colonist.needs.health == pytest.approx(99.5)
        engine.update(1.0)
        assert colonist.needs.health == pytest.approx(98.5)

    def test_dead_colonist_releases_task(self, engine: SimulationEngine, add_colonist) -> None:
        colonist = add_colonist((3, 3))
        task = engine.add_task(TaskType.HAUL, (8, 8))
        engine.claim_task(task, colonist)
        colonist.needs.hunger = 0.0
        colonist.needs.health = 0.5
        engine.update(1.0)
        assert engine.colonists == []
        assert task in engine.tasks
        assert task.assigned_to is None
        assert f"{colonist.name} has died" in engine.messages
        assert GameEvent.ALERT in engine.events.events

    def test_dead_colonist_vacates_bed(self, engine: SimulationEngine, add_colonist) -> None:
        from burrow.economy.building import create_bed

        colonist = add_colonist((3, 3))
        bed = create_bed(engine.ids, (4, 4))
        bed.occupied_by = colonist.id
        engine.beds.append(bed)
        colonist.needs.health = 0.0
        engine.update(1.0)
        assert bed.occupied_by is None

    def test_game_over(self, engine: SimulationEngine, add_colonist) -> None:
        colonist = add_colonist((3, 3))
        assert not engine.is_game_over()
        colonist.needs.health = 0.0
        engine.update(1.0)
        assert engine.is_game_over()

    def test_not_over_on_title(self, default_config: SimulationConfig) -> None:
        assert not SimulationEngine(config=default_config).is_game_over()

    def test_score(self, engine: SimulationEngine, add_colonist) -> None:
        add_colonist((3, 3))
        add_colonist((4, 3))
        engine.clock.day = 3
        engine.stats.tiles_built = 4
        engine.set_design_mode(DesignMode.STOCKPILE)
        engine.designate_area((1, 1), (2, 1))
        engine.world.place_item(1, 1, ItemStack(ItemType.WOOD, 5))
        # 2 days * 10 + 2 colonists * 100 + 4 built * 5 + 5 items * 2
        assert engine.score() == 250


class TestTaskDispatch:
    """Tests for the engine's claim and dispatch helpers."""

    def test_claim_sets_state_and_path(self, engine: SimulationEngine, add_colonist) -> None:
        colonist = add_colonist((1, 1))
        task = engine.add_task(TaskType.HAUL, (3, 1))
        engine.claim_task(task, colonist)
        assert task.assigned_to == colonist.id
        assert colonist.current_task == task.id
        assert colonist.state is ColonistState.WORKING
        assert colonist.path == [(1, 1), (2, 1), (3, 1)]

    def test_claim_refuses_unreachable_task(self, engine: SimulationEngine, add_colonist) -> None:
        for pos in ((7, 6), (9, 6), (8, 5), (8, 7)):
            engine.world.set_tile_type(*pos, TileType.WATER)
        colonist = add_colonist((1, 1))
        task = engine.add_task(TaskType.HAUL, (8, 6))
        assert not engine.claim_task(task, colonist)
        assert task.assigned_to is None
        assert colonist.current_task is None
        assert colonist.is_idle
        assert colonist.path == []

    def test_claim_when_already_beside_target(self, engine: SimulationEngine, add_colonist) -> None:
        # Walled in next to the rock: no route, but the work is in reach
        engine.world.set_tile_type(8, 6, TileType.ROCK)
        for pos in ((7, 6), (9, 6), (8, 7)):
            engine.world.set_tile_type(*pos, TileType.WATER)
        colonist = add_colonist((8, 5))
        engine.world.set_tile_type(8, 5, TileType.WALL)
        task = engine.add_task(TaskType.MINE, (8, 6))
        assert engine.claim_task(task, colonist)
        assert task.assigned_to == colonist.id
        assert colonist.path == [(8, 5)]

    def test_assign_tasks_skips_colonist_who_cannot_reach(
        self, engine: SimulationEngine, add_colonist
    ) -> None:
        for x in range(16):
            engine.world.set_tile_type(x, 4, TileType.WALL)
        near = add_colonist((9, 3), name="Ada")
        far = add_colonist((0, 12), name="Bo")
        task = engine.add_task(TaskType.HAUL, (9, 9))
        engine.assign_tasks()
        assert task.assigned_to == far.id
        assert near.is_idle

    def test_reassignment_clears_previous_holder(self, engine: SimulationEngine, add_colonist) -> None:
        first = add_colonist((1, 1), name="Ada")
        second = add_colonist((5, 5), name="Bo")
        task = engine.add_task(TaskType.HAUL, (3, 3))
        engine.claim_task(task, first)
        engine.claim_task(task, second)
        assert task.assigned_to == second.id
        assert first.current_task is None
        assert first.state is ColonistState.IDLE
        assert first.path == []

    def test_assign_tasks_picks_nearest_idle(self, engine: SimulationEngine, add_colonist) -> None:
        far = add_colonist((0, 0), name="Ada")
        near = add_colonist((10, 10), name="Bo")
        task = engine.add_task(TaskType.HAUL, (9, 9))
        engine.assign_tasks()
        assert task.assigned_to == near.id
        assert far.is_idle

    def test_assign_tasks_without_idle(self, engine: SimulationEngine, add_colonist) -> None:
        colonist = add_colonist((0, 0))
        colonist.state = ColonistState.SLEEPING
        task = engine.add_task(TaskType.HAUL, (9, 9))
        engine.assign_tasks()
        assert task.assigned_to is None

    def test_colonist_by_id(self, engine: SimulationEngine, add_colonist) -> None:
        colonist = add_colonist((0, 0))
        assert engine.colonist_by_id(colonist.id) is colonist
        assert engine.colonist_by_id("colonist-99") is None
