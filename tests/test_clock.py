"""Tests for burrow.world.clock."""

import pytest

from burrow.world.clock import GameClock


class TestGameClock:
    """Tests for the day/hour/minute calendar."""

    def test_defaults(self) -> None:
        clock = GameClock()
        assert (clock.day, clock.hour, clock.minute) == (1, 8, 0.0)

    def test_minutes_roll_into_hours(self) -> None:
        clock = GameClock(day=1, hour=8, minute=30)
        assert clock.advance(45) == 0
        assert clock.hour == 9
        assert clock.minute == pytest.approx(15)

    def test_day_rollover(self) -> None:
        clock = GameClock(day=1, hour=23, minute=59)
        assert clock.advance(2) == 1
        assert (clock.day, clock.hour) == (2, 0)
        assert clock.minute == pytest.approx(1)

    def test_multiple_days(self) -> None:
        clock = GameClock(day=3, hour=0, minute=0)
        assert clock.advance(48 * 60) == 2
        assert clock.day == 5

    @pytest.mark.parametrize(
        ("hour", "daytime"),
        [(5, False), (6, True), (12, True), (19, True), (20, False), (23, False)],
    )
    def test_daytime(self, hour: int, daytime: bool) -> None:
        clock = GameClock(hour=hour)
        assert clock.is_daytime is daytime
        assert clock.is_nighttime is not daytime

    def test_day_progress(self) -> None:
        assert GameClock(hour=4).day_progress == 0.0
        assert GameClock(hour=13).day_progress == pytest.approx(0.5)
        assert GameClock(hour=21).day_progress == 1.0

    def test_time_string(self) -> None:
        assert GameClock(day=5, hour=14, minute=30.7).time_string() == "Day 5, 14:30"
        assert GameClock(day=1, hour=8, minute=5).time_string() == "Day 1, 08:05"
